from __future__ import annotations

import logging

from django.conf import settings
from django.http import HttpRequest

from festcore.apps.accounts.auth import role_required
from festcore.apps.accounts.models import Profile
from festcore.apps.core.errors import ServiceError
from festcore.apps.core.http import api_view, json_body, json_response

from .forms import ConfirmationForm, ContactForm, SendEmailForm
from .models import SentEmail
from .services import EmailDeliveryError, registration_received, send_best_effort, send_email

logger = logging.getLogger(__name__)


def sent_email_to_dict(e: SentEmail) -> dict:
    return {
        "id": e.pk,
        "to": e.to_email,
        "from": e.from_email,
        "subject": e.subject,
        "body": e.body,
        "createdAt": e.created_at,
    }


@api_view(["POST"])
def contact(request: HttpRequest):
    data = ContactForm(json_body(request)).validated()
    recipient = settings.CONTACT_EMAIL or settings.EMAIL_HOST_USER
    if not recipient:
        logger.error("CONTACT_EMAIL no configurado; no se puede entregar el formulario de contacto")
        raise ServiceError(
            "Email service not configured",
            details={"message": "Configure CONTACT_EMAIL to receive contact form submissions."},
        )

    body = (
        "New contact form submission:\n\n"
        f"Name: {data['name']}\n"
        f"Email: {data['email']}\n\n"
        f"Message:\n{data['message']}"
    )
    try:
        send_email(recipient, f"Contact Form: New Message from {data['name']}", body)
        send_email(
            data["email"],
            "Thank you for contacting us",
            f"Hi {data['name']},\n\nThank you for reaching out! We have received your message "
            "and will get back to you soon.\n\nBest regards,\nThe Team",
        )
    except EmailDeliveryError as exc:
        raise ServiceError(str(exc))
    return json_response({"success": True, "message": "Your message has been sent successfully!"})


@api_view(["POST"])
@role_required(Profile.ROLE_ADMIN, Profile.ROLE_COMMUNITY_ADMIN, Profile.ROLE_SPORTS_ADMIN)
def send(request: HttpRequest):
    payload = json_body(request)
    if "from" in payload:
        payload["sender"] = payload.pop("from")
    data = SendEmailForm(payload).validated()
    try:
        record = send_email(
            data["to"], data["subject"], data["body"],
            from_email=data.get("sender") or settings.REGISTRATION_EMAIL,
        )
    except EmailDeliveryError as exc:
        raise ServiceError(str(exc))
    return json_response({"success": True, "email": sent_email_to_dict(record)})


@api_view(["POST"])
def registration_confirmation(request: HttpRequest):
    data = ConfirmationForm(json_body(request)).validated()
    subject, body = registration_received(settings.FESTIVAL_NAME)
    sent = send_best_effort(data["to"], subject, body, from_email=settings.REGISTRATION_EMAIL)
    message = (
        "Confirmation email sent successfully" if sent
        else "Registration successful, but email could not be sent"
    )
    return json_response({"success": True, "message": message})


@api_view(["GET"])
@role_required(Profile.ROLE_ADMIN)
def outbox(request: HttpRequest):
    return json_response([sent_email_to_dict(e) for e in SentEmail.objects.all()])
