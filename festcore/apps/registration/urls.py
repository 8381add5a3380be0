from django.urls import path
from . import views

urlpatterns = [
    path("participants", views.participants_collection, name="participants"),
    path("participants/me", views.my_participant, name="participants_me"),
    path("participants/me/sports", views.my_sports, name="participants_me_sports"),
    path("participants/bulk-upload", views.participants_bulk_upload, name="participants_bulk_upload"),
    path("participants/bulk-upload/template", views.participants_bulk_template, name="participants_bulk_template"),
    path("participants/export/<str:fmt>", views.participants_export, name="participants_export"),
    path("participants/<int:pk>", views.participant_detail, name="participant_detail"),
    path("participants/<int:pk>/status", views.participant_status, name="participant_status"),

    path("settings", views.festival_settings, name="festival_settings"),
]
