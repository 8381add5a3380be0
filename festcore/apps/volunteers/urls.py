from django.urls import path
from . import views

urlpatterns = [
    path("volunteers", views.volunteers_collection, name="volunteers"),
    path("volunteers/me", views.my_volunteer, name="volunteers_me"),
    path("volunteers/me/sport", views.my_volunteer_sport, name="volunteers_me_sport"),
    path("volunteers/export/<str:fmt>", views.volunteers_export, name="volunteers_export"),
    path("volunteers/<int:pk>", views.volunteer_detail, name="volunteer_detail"),

    path("departments", views.departments_collection, name="departments"),
]
