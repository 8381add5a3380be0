from django.urls import path
from . import views

urlpatterns = [
    path("communities", views.communities_collection, name="communities"),
    path("communities/<int:pk>", views.community_detail_view, name="community_detail"),

    # Contactos
    path("community-contacts/community/<int:community_id>", views.community_contacts, name="community_contacts"),
    path("community-contacts/<int:pk>", views.community_contact_detail, name="community_contact_detail"),
]
