from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import Q
from django.http import HttpRequest, HttpResponse

from festcore.apps.accounts.auth import authenticate_request, require_role, token_required
from festcore.apps.accounts.models import Profile
from festcore.apps.communities.models import Community
from festcore.apps.core.errors import AccessDenied, BadRequest, NotFound, ValidationFailed
from festcore.apps.core.exports import XLSX_CONTENT_TYPE, export_response
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response, query_int

from .forms import (
    BulkUploadForm,
    FestivalSettingsForm,
    MySportsForm,
    ParticipantForm,
    ParticipantProfileForm,
    RegistrationForm,
    StatusForm,
)
from .models import FestivalSettings, Participant
from .serializers import (
    PARTICIPANT_EXPORT_HEADERS,
    participant_export_row,
    participant_to_dict,
    settings_to_dict,
)
from .services import bulk_upload
from .services.workflow import (
    PARTICIPANT_MANAGERS,
    admin_replace_sports,
    apply_profile_fields,
    change_status,
    create_participant,
    ensure_in_scope,
    save_profile,
    scope_participants,
    update_my_profile,
    update_my_sports,
)

logger = logging.getLogger(__name__)


def _base_queryset():
    return Participant.objects.select_related("community", "user")


def _load_managed(request: HttpRequest, pk: int):
    """Participante dentro del alcance del revisor. Inexistente -> 404; ajeno -> 403."""
    profile = require_role(authenticate_request(request), *PARTICIPANT_MANAGERS)
    participant = get_or_404(_base_queryset(), "Participant not found", pk=pk)
    ensure_in_scope(profile, participant)
    return profile, participant


def _my_participant(request: HttpRequest) -> Participant:
    user = authenticate_request(request)
    participant = _base_queryset().filter(user=user).first()
    if participant is None:
        raise NotFound("Participant not found")
    return participant


def _filtered(request: HttpRequest, profile: Profile):
    qs = scope_participants(profile, _base_queryset())
    status = (request.GET.get("status") or "").strip()
    if status:
        qs = qs.filter(status=status)
    community_id = query_int(request, "communityId")
    if community_id:
        qs = qs.filter(community_id=community_id)
    sport_id = query_int(request, "sportId")
    if sport_id:
        qs = qs.filter(sport_links__sport_id=sport_id).distinct()
    search = (request.GET.get("search") or "").strip()
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(email__icontains=search)
            | Q(phone__icontains=search)
        )
    return qs


# ---------- Colección ----------

@api_view(["GET", "POST"])
def participants_collection(request: HttpRequest):
    if request.method == "POST":
        return _register(request)

    profile = require_role(authenticate_request(request), *PARTICIPANT_MANAGERS)
    reference = FestivalSettings.load().age_calculator_date
    return json_response([participant_to_dict(p, reference) for p in _filtered(request, profile)])


def _register(request: HttpRequest):
    """Auto-registro público: queda en 'pending' hasta revisión."""
    data = RegistrationForm(json_body(request)).validated()
    community = get_or_404(Community.objects, "Community not found", pk=data["communityId"])
    if not community.active:
        raise ValidationFailed("Community is not active", details={"communityId": ["Community is not active"]})
    participant = create_participant(data, community, data["sports"])
    return json_response(participant_to_dict(participant, FestivalSettings.load().age_calculator_date), status=201)


# ---------- Detalle ----------

@api_view(["GET", "PATCH", "DELETE"])
def participant_detail(request: HttpRequest, pk: int):
    _, participant = _load_managed(request, pk)

    if request.method == "DELETE":
        # Se elimina también la cuenta de acceso (el participante cae en cascada)
        with transaction.atomic():
            participant.user.delete()
        logger.info("Participante #%s eliminado por %s", pk, request.user.username)
        return json_response({"success": True})

    if request.method == "PATCH":
        form = ParticipantForm(json_body(request), partial=True)
        data = form.provided()
        sports = data.pop("sports", None)
        with transaction.atomic():
            apply_profile_fields(participant, data)
            if sports is not None:
                admin_replace_sports(participant, sports)
            save_profile(participant)

    return json_response(participant_to_dict(participant, FestivalSettings.load().age_calculator_date))


@api_view(["PATCH"])
def participant_status(request: HttpRequest, pk: int):
    _, participant = _load_managed(request, pk)
    data = StatusForm(json_body(request)).validated()
    participant, _changed = change_status(participant.pk, data["status"].strip().lower())
    return json_response(participant_to_dict(participant, FestivalSettings.load().age_calculator_date))


# ---------- Autoservicio ----------

@api_view(["GET", "PATCH"])
def my_participant(request: HttpRequest):
    participant = _my_participant(request)
    festival = FestivalSettings.load()
    if request.method == "PATCH":
        data = ParticipantProfileForm(json_body(request), partial=True).provided()
        participant = update_my_profile(participant, data, freeze_date=festival.profile_freeze_date)
    return json_response(participant_to_dict(participant, festival.age_calculator_date))


@api_view(["PATCH"])
def my_sports(request: HttpRequest):
    participant = _my_participant(request)
    festival = FestivalSettings.load()
    data = MySportsForm(json_body(request)).validated()
    participant, _changed = update_my_sports(
        participant, data["selection"], freeze_date=festival.profile_freeze_date
    )
    return json_response(participant_to_dict(participant, festival.age_calculator_date))


# ---------- Carga masiva / export ----------

@api_view(["POST"])
def participants_bulk_upload(request: HttpRequest):
    profile = require_role(authenticate_request(request), Profile.ROLE_ADMIN, Profile.ROLE_COMMUNITY_ADMIN)
    data = BulkUploadForm(json_body(request)).validated()

    if profile.role == Profile.ROLE_COMMUNITY_ADMIN:
        if not profile.community_id:
            raise AccessDenied("Your account is not linked to a community")
        if data.get("communityId") and data["communityId"] != profile.community_id:
            raise AccessDenied("Access denied")
        community = profile.community
    elif data.get("communityId"):
        community = get_or_404(Community.objects, "Community not found", pk=data["communityId"])
        if not community.active:
            raise ValidationFailed("Community is not active", details={"communityId": ["Community is not active"]})
    else:
        community = None  # la columna 'community' de cada fila decide

    upload = request.FILES.get("file")
    if upload is None:
        raise BadRequest("No file uploaded", details={"file": ["file is required"]})

    records = bulk_upload.read_rows(upload.name, upload.read())
    result = bulk_upload.process_upload(records, community)
    return json_response(result.as_dict())


@api_view(["GET"])
@token_required
def participants_bulk_template(request: HttpRequest):
    require_role(request.user, Profile.ROLE_ADMIN, Profile.ROLE_COMMUNITY_ADMIN)
    resp = HttpResponse(bulk_upload.build_template(), content_type=XLSX_CONTENT_TYPE)
    resp["Content-Disposition"] = 'attachment; filename="participants-template.xlsx"'
    return resp


@api_view(["GET"])
def participants_export(request: HttpRequest, fmt: str):
    profile = require_role(authenticate_request(request), *PARTICIPANT_MANAGERS)
    reference = FestivalSettings.load().age_calculator_date
    rows = [participant_export_row(p, reference) for p in _filtered(request, profile)]
    return export_response(rows, PARTICIPANT_EXPORT_HEADERS, fmt, "participants")


# ---------- Configuración ----------

@api_view(["GET", "PATCH"])
def festival_settings(request: HttpRequest):
    user = authenticate_request(request)
    festival = FestivalSettings.load()
    if request.method == "PATCH":
        require_role(user, Profile.ROLE_ADMIN)
        form = FestivalSettingsForm(json_body(request), partial=True)
        data = form.provided()
        if data.get("ageCalculatorDate"):
            festival.age_calculator_date = data["ageCalculatorDate"]
        if "profileFreezeDate" in data:
            festival.profile_freeze_date = data["profileFreezeDate"]
        festival.save()
        logger.info("Configuración actualizada por %s", user.username)
    return json_response(settings_to_dict(festival))
