# festcore/apps/registration/services/workflow.py
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import QuerySet
from django.utils.crypto import get_random_string

from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.services import create_account
from festcore.apps.core.errors import AccessDenied, Conflict, ValidationFailed
from festcore.apps.notifications import services as mail
from festcore.apps.sports.models import Sport
from festcore.apps.sports.services.taxonomy import ensure_compatible, load_active_sports

from ..models import Participant, ParticipantSport, is_frozen
from .selection import SportSelection, normalize_selection, selection_ids, selection_to_json

logger = logging.getLogger(__name__)

PARTICIPANT_MANAGERS = (Profile.ROLE_ADMIN, Profile.ROLE_COMMUNITY_ADMIN, Profile.ROLE_SPORTS_ADMIN)


# ------------------------------
# Alcance por rol
# ------------------------------
def scope_participants(profile: Profile, qs: Optional[QuerySet] = None) -> QuerySet:
    """
    admin: todos; community_admin: su comunidad;
    sports_admin: quienes tienen su deporte (o un hijo de su deporte).
    """
    qs = Participant.objects.all() if qs is None else qs
    if profile.role == Profile.ROLE_ADMIN:
        return qs
    if profile.role == Profile.ROLE_COMMUNITY_ADMIN:
        if not profile.community_id:
            return qs.none()
        return qs.filter(community_id=profile.community_id)
    if profile.role == Profile.ROLE_SPORTS_ADMIN:
        if not profile.sport_id:
            return qs.none()
        family = profile.sport.family_ids()
        return qs.filter(sport_links__sport_id__in=family).distinct()
    raise AccessDenied("Insufficient permissions")


def ensure_in_scope(profile: Profile, participant: Participant) -> None:
    """Fuera de alcance -> 403 (nunca 404: el recurso existe)."""
    if profile.role == Profile.ROLE_ADMIN:
        return
    if profile.role == Profile.ROLE_COMMUNITY_ADMIN:
        if profile.community_id and participant.community_id == profile.community_id:
            return
        raise AccessDenied("Access denied")
    if profile.role == Profile.ROLE_SPORTS_ADMIN and profile.sport_id:
        family = set(profile.sport.family_ids())
        if family & participant.live_sport_ids():
            return
    raise AccessDenied("Access denied")


# ------------------------------
# Freeze de perfiles
# ------------------------------
def ensure_not_frozen(
    freeze_date: Optional[date],
    now: Optional[datetime] = None,
    message: str = "Profile updates are frozen",
) -> None:
    if is_frozen(freeze_date, now):
        raise AccessDenied(
            message,
            details={"message": f"Profile and sports changes closed at the end of {freeze_date.isoformat()}"},
        )


# ------------------------------
# Validación de selección
# ------------------------------
def validate_selection(selection: List[SportSelection]) -> List[Sport]:
    if not selection:
        raise ValidationFailed(
            "At least one sport must be selected",
            details={"sports": ["At least one sport must be selected"]},
        )
    sports = load_active_sports(selection_ids(selection))
    ensure_compatible(selection_ids(selection))
    return sports


def replace_live_sports(participant: Participant, selection: Iterable[SportSelection]) -> None:
    """Reemplaza las asociaciones vivas. Ids que ya no existen se descartan (con warning)."""
    selection = list(selection)
    existing = set(Sport.objects.filter(pk__in=selection_ids(selection)).values_list("pk", flat=True))
    dropped = [sid for sid in selection_ids(selection) if sid not in existing]
    if dropped:
        logger.warning(
            "Participante #%s: deportes inexistentes descartados %s (quedan %d)",
            participant.pk, dropped, len(selection) - len(dropped),
        )
    participant.sport_links.all().delete()
    ParticipantSport.objects.bulk_create(
        [
            ParticipantSport(participant=participant, sport_id=s.sport_id, notes=s.notes or "")
            for s in selection
            if s.sport_id in existing
        ]
    )


def live_selection(participant: Participant) -> List[SportSelection]:
    return [
        SportSelection(link.sport_id, link.notes or None)
        for link in participant.sport_links.all()
    ]


def effective_selection(participant: Participant) -> List[SportSelection]:
    """La propuesta pendiente si existe; si no, la selección viva."""
    if participant.pending_sports is not None:
        return normalize_selection(participant.pending_sports)
    return live_selection(participant)


# ------------------------------
# Alta directa
# ------------------------------
def username_from_email(email: str) -> str:
    base = (email.split("@")[0] or "participant")[:20]
    candidate = f"{base}_{get_random_string(6, '0123456789')}"
    while User.objects.filter(username=candidate).exists():
        candidate = f"{base}_{get_random_string(6, '0123456789')}"
    return candidate


def ensure_email_available(email: str, exclude: Optional[Participant] = None) -> None:
    """'exclude': el propio participante (y su cuenta) al editar."""
    participants = Participant.objects.filter(email__iexact=email)
    users = User.objects.filter(email__iexact=email)
    if exclude is not None:
        participants = participants.exclude(pk=exclude.pk)
        users = users.exclude(pk=exclude.user_id)
    if participants.exists():
        raise Conflict("Participant with this email already exists")
    if users.exists():
        raise Conflict("An account with this email already exists")


def create_participant(data: dict, community, selection: List[SportSelection]) -> Participant:
    """
    Auto-registro: User (rol user) + Participant en 'pending' + deportes.
    El correo de 'registro recibido' es best-effort.
    """
    ensure_email_available(data["email"])
    validate_selection(selection)

    with transaction.atomic():
        user = create_account(
            username=username_from_email(data["email"]),
            password=data["password"],
            role=Profile.ROLE_USER,
            email=data["email"],
            first_name=data["firstName"],
            last_name=data["lastName"],
            community=community,
        )
        participant = Participant.objects.create(
            user=user,
            community=community,
            first_name=data["firstName"],
            middle_name=data.get("middleName") or "",
            last_name=data["lastName"],
            gender=data["gender"],
            dob=data["dob"],
            email=data["email"],
            phone=data["phone"],
            next_of_kin=data["nextOfKin"],
            team_name=data.get("teamName") or "",
            notes=data.get("notes") or "",
            status=Participant.STATUS_PENDING,
        )
        replace_live_sports(participant, selection)

    logger.info("Participante #%s registrado en %s (pending)", participant.pk, community)
    subject, body = mail.registration_received(settings.FESTIVAL_NAME)
    mail.send_best_effort(participant.email, subject, body, from_email=settings.REGISTRATION_EMAIL)
    return participant


# ------------------------------
# Máquina de estados
# ------------------------------
def _transition_allowed(current: str, target: str, allow_reopen: bool) -> bool:
    if current == Participant.STATUS_PENDING:
        return target in (Participant.STATUS_ACCEPTED, Participant.STATUS_REJECTED)
    if current == Participant.STATUS_REJECTED:
        return target == Participant.STATUS_PENDING and allow_reopen
    return False


def change_status(participant_id: int, target: str, *, allow_reopen: Optional[bool] = None) -> Tuple[Participant, bool]:
    """
    Aplica la transición pedida por un revisor. Devuelve (participante, cambió).
      pending -> accepted: aplica pending_sports (si hay) y lo limpia
      pending -> rejected: descarta pending_sports
      rejected -> pending: sólo con FESTIVAL_ALLOW_REJECTED_REOPEN
    Re-enviar el estado actual no hace nada. Lectura-modificación-escritura
    bajo select_for_update en una sola transacción.
    """
    valid = {s for s, _ in Participant.STATUS_CHOICES}
    if target not in valid:
        raise ValidationFailed("Invalid status", details={"status": [f"Must be one of: {', '.join(sorted(valid))}"]})
    if allow_reopen is None:
        allow_reopen = settings.FESTIVAL_ALLOW_REJECTED_REOPEN

    with transaction.atomic():
        participant = Participant.objects.select_for_update().get(pk=participant_id)
        current = participant.status
        if current == target:
            return participant, False
        if not _transition_allowed(current, target, allow_reopen):
            raise Conflict(f"Cannot change status from {current} to {target}")

        if target == Participant.STATUS_ACCEPTED and participant.pending_sports is not None:
            snapshot = normalize_selection(participant.pending_sports)
            _revalidate_snapshot(snapshot)
            replace_live_sports(participant, snapshot)
        participant.pending_sports = None
        participant.status = target
        participant.save(update_fields=["status", "pending_sports", "updated_at"])

    logger.info("Participante #%s: %s -> %s", participant.pk, current, target)
    _notify_status(participant, target)
    return participant, True


def _revalidate_snapshot(snapshot: List[SportSelection]) -> None:
    """
    La propuesta pudo quedar vieja: deportes desactivados o marcados como
    incompatibles después de proponerla. Los ids borrados no cuentan aquí.
    """
    ids = list(Sport.objects.filter(pk__in=selection_ids(snapshot)).values_list("pk", flat=True))
    load_active_sports(ids)
    ensure_compatible(ids)


def _notify_status(participant: Participant, status: str) -> None:
    festival = settings.FESTIVAL_NAME
    if status == Participant.STATUS_ACCEPTED:
        sports = ", ".join(
            link.sport.display_name
            for link in participant.sport_links.select_related("sport", "sport__parent")
        )
        subject, body = mail.registration_accepted(
            festival, participant.full_name, participant.community.name, sports
        )
    elif status == Participant.STATUS_REJECTED:
        subject, body = mail.registration_rejected(festival, participant.full_name)
    else:
        return
    mail.send_best_effort(participant.email, subject, body, from_email=settings.REGISTRATION_EMAIL)


# ------------------------------
# Autoservicio
# ------------------------------
def update_my_sports(
    participant: Participant,
    selection: List[SportSelection],
    *,
    freeze_date: Optional[date],
    now: Optional[datetime] = None,
) -> Tuple[Participant, bool]:
    """
    Cambio de deportes hecho por el propio participante.
    Mismo conjunto de ids que la selección efectiva -> sin cambios.
    Si difiere se guarda como propuesta en pending_sports y un 'accepted'
    vuelve a 'pending' para revisión.
    """
    ensure_not_frozen(freeze_date, now)
    if participant.status == Participant.STATUS_REJECTED:
        raise Conflict("Rejected registrations cannot change their sports")

    if set(selection_ids(selection)) == set(selection_ids(effective_selection(participant))):
        return participant, False

    validate_selection(selection)
    with transaction.atomic():
        participant = Participant.objects.select_for_update().get(pk=participant.pk)
        participant.pending_sports = selection_to_json(selection)
        previous = participant.status
        if previous == Participant.STATUS_ACCEPTED:
            participant.status = Participant.STATUS_PENDING
        participant.save(update_fields=["status", "pending_sports", "updated_at"])

    if previous != participant.status:
        logger.info("Participante #%s cambió deportes: %s -> pending", participant.pk, previous)
    return participant, True


def update_my_profile(
    participant: Participant,
    data: dict,
    *,
    freeze_date: Optional[date],
    now: Optional[datetime] = None,
) -> Participant:
    ensure_not_frozen(freeze_date, now)
    with transaction.atomic():
        apply_profile_fields(participant, data)
        save_profile(participant)
    return participant


PROFILE_FIELDS = {
    "firstName": "first_name",
    "middleName": "middle_name",
    "lastName": "last_name",
    "gender": "gender",
    "dob": "dob",
    "email": "email",
    "phone": "phone",
    "nextOfKin": "next_of_kin",
    "teamName": "team_name",
    "notes": "notes",
}

_BLANKABLE = ("middleName", "teamName", "notes")


def apply_profile_fields(participant: Participant, data: dict) -> None:
    email = data.get("email")
    if email and email.casefold() != (participant.email or "").casefold():
        ensure_email_available(email, exclude=participant)
    for key, attr in PROFILE_FIELDS.items():
        if key not in data:
            continue
        value = data[key]
        if key in _BLANKABLE:
            value = value or ""
        elif value in (None, ""):
            continue
        setattr(participant, attr, value)


def save_profile(participant: Participant) -> None:
    """Guarda el participante y mantiene el email de la cuenta de acceso alineado."""
    participant.save()
    user = participant.user
    if user.email != participant.email:
        user.email = participant.email
        user.save(update_fields=["email"])


def admin_replace_sports(participant: Participant, selection: List[SportSelection]) -> None:
    """Edición administrativa: se aplica de inmediato y se descarta cualquier propuesta."""
    validate_selection(selection)
    with transaction.atomic():
        replace_live_sports(participant, selection)
        participant.pending_sports = None
        participant.save(update_fields=["pending_sports", "updated_at"])
