from django.urls import path
from . import views

urlpatterns = [
    path("email/contact", views.contact, name="email_contact"),
    path("email/send", views.send, name="email_send"),
    path("email/registration-confirmation", views.registration_confirmation, name="email_registration_confirmation"),
    path("email/outbox", views.outbox, name="email_outbox"),
]
