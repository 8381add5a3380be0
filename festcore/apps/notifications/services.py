from __future__ import annotations

import logging
from html import escape
from typing import Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from .models import SentEmail

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """El backend de correo no pudo entregar el mensaje."""


def _as_html(body: str) -> str:
    return escape(body).replace("\n", "<br>")


def send_email(to: str, subject: str, body: str, from_email: Optional[str] = None) -> SentEmail:
    """
    Envía texto plano + alternativa HTML y deja constancia en SentEmail.
    Cualquier falla del backend se re-lanza como EmailDeliveryError.
    """
    sender = from_email or settings.DEFAULT_FROM_EMAIL
    message = EmailMultiAlternatives(subject=subject, body=body, from_email=sender, to=[to])
    message.attach_alternative(_as_html(body), "text/html")
    try:
        message.send(fail_silently=False)
    except Exception as exc:
        logger.error("Fallo al enviar '%s' a %s: %s", subject, to, exc)
        raise EmailDeliveryError(str(exc) or "Failed to send email") from exc

    logger.info("Correo enviado: '%s' -> %s", subject, to)
    return SentEmail.objects.create(to_email=to, from_email=sender, subject=subject, body=body)


def send_best_effort(to: str, subject: str, body: str, from_email: Optional[str] = None) -> Optional[SentEmail]:
    """Para flujos cuyo efecto principal no es el correo: se registra la falla y se sigue."""
    try:
        return send_email(to, subject, body, from_email=from_email)
    except EmailDeliveryError:
        logger.warning("Correo no enviado (best-effort): '%s' -> %s", subject, to)
        return None


# ---------- Plantillas ----------

def registration_received(festival: str) -> tuple[str, str]:
    subject = f"{festival} - Registration Received"
    body = (
        "Dear Participant,\n\n"
        f"Thank you for registering for {festival}!\n\n"
        "Your registration has been received and is currently pending approval. "
        "You will receive another email once your registration has been reviewed.\n\n"
        "If you have any questions, please don't hesitate to contact us.\n\n"
        f"Best regards,\n{festival} Team"
    )
    return subject, body


def registration_accepted(festival: str, name: str, community: str, sports: str) -> tuple[str, str]:
    subject = f"{festival} - Registration Accepted!"
    body = (
        f"Dear {name},\n\n"
        f"Congratulations! Your registration for {festival} has been accepted!\n\n"
        f"You have been accepted into {community} for the following sports:\n{sports}\n\n"
        "You can now log in to your account to view your registration details and upcoming events.\n\n"
        f"Best regards,\n{festival} Team"
    )
    return subject, body


def registration_rejected(festival: str, name: str) -> tuple[str, str]:
    subject = f"{festival} - Registration Update"
    body = (
        f"Dear {name},\n\n"
        f"Thank you for your interest in {festival}.\n\n"
        "Unfortunately, we are unable to accept your registration at this time. "
        "If you would like to discuss this further, please contact us.\n\n"
        f"Best regards,\n{festival} Team"
    )
    return subject, body
