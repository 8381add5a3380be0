from __future__ import annotations

import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.http import HttpRequest

from festcore.apps.accounts.auth import authenticate_request, require_role, role_required, token_required
from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.services import create_account, ensure_username_available
from festcore.apps.core.errors import Conflict, NotFound, ValidationFailed
from festcore.apps.core.exports import export_response
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response, query_int
from festcore.apps.registration.models import FestivalSettings
from festcore.apps.registration.services.workflow import ensure_not_frozen
from festcore.apps.sports.models import Sport

from .forms import DepartmentForm, VolunteerForm, VolunteerProfileForm, VolunteerSportForm
from .models import Department, Volunteer
from .serializers import (
    VOLUNTEER_EXPORT_HEADERS,
    department_to_dict,
    volunteer_export_row,
    volunteer_to_dict,
)

logger = logging.getLogger(__name__)

VOLUNTEER_MANAGERS = (Profile.ROLE_ADMIN, Profile.ROLE_VOLUNTEER_ADMIN)

FIELD_MAP = {
    "firstName": "first_name",
    "middleName": "middle_name",
    "lastName": "last_name",
    "gender": "gender",
    "dob": "dob",
    "email": "email",
    "phone": "phone",
}


# ---------- Utilidades ----------

def _queryset():
    return Volunteer.objects.select_related("user", "department", "sport", "sport__parent")


def _my_volunteer(request: HttpRequest) -> Volunteer:
    user = authenticate_request(request)
    volunteer = _queryset().filter(user=user).first()
    if volunteer is None:
        raise NotFound("Volunteer not found")
    return volunteer


def _sport_or_none(sport_id):
    if not sport_id:
        return None
    sport = get_or_404(Sport.objects, "Sport not found", pk=sport_id)
    if not sport.active:
        raise ValidationFailed("Sport is not active", details={"sportId": ["Sport is not active"]})
    return sport


def _department_or_none(department_id):
    if not department_id:
        return None
    return get_or_404(Department.objects, "Department not found", pk=department_id)


def _apply(volunteer: Volunteer, data: dict) -> None:
    for key, attr in FIELD_MAP.items():
        if key not in data:
            continue
        value = data[key]
        if key == "middleName":
            value = value or ""
        elif value in (None, ""):
            continue
        setattr(volunteer, attr, value)


# ---------- Colección ----------

@api_view(["GET", "POST"])
def volunteers_collection(request: HttpRequest):
    if request.method == "POST":
        return _create_volunteer(request)

    require_role(authenticate_request(request), *VOLUNTEER_MANAGERS)
    qs = _queryset()
    sport_id = query_int(request, "sportId")
    if sport_id:
        qs = qs.filter(sport_id=sport_id)
    department_id = query_int(request, "departmentId")
    if department_id:
        qs = qs.filter(department_id=department_id)
    return json_response([volunteer_to_dict(v) for v in qs])


def _create_volunteer(request: HttpRequest):
    """Alta pública: crea la cuenta (rol volunteer) y el voluntario."""
    data = VolunteerForm(json_body(request)).validated()
    ensure_username_available(data["username"])
    if Volunteer.objects.filter(email__iexact=data["email"]).exists():
        raise Conflict("Volunteer with this email already exists")
    if User.objects.filter(email__iexact=data["email"]).exists():
        raise Conflict("An account with this email already exists")

    sport = _sport_or_none(data.get("sportId"))
    department = _department_or_none(data.get("departmentId"))

    with transaction.atomic():
        user = create_account(
            username=data["username"],
            password=data["password"],
            role=Profile.ROLE_VOLUNTEER,
            email=data["email"],
            first_name=data["firstName"],
            last_name=data["lastName"],
        )
        volunteer = Volunteer(user=user, sport=sport, department=department)
        _apply(volunteer, data)
        volunteer.save()

    logger.info("Voluntario #%s registrado (%s)", volunteer.pk, user.username)
    return json_response(volunteer_to_dict(volunteer), status=201)


# ---------- Autoservicio ----------

@api_view(["GET", "PATCH"])
def my_volunteer(request: HttpRequest):
    volunteer = _my_volunteer(request)
    if request.method == "PATCH":
        ensure_not_frozen(FestivalSettings.load().profile_freeze_date)
        data = VolunteerProfileForm(json_body(request), partial=True).provided()
        _apply(volunteer, data)
        volunteer.save()
    return json_response(volunteer_to_dict(volunteer))


@api_view(["PATCH"])
def my_volunteer_sport(request: HttpRequest):
    volunteer = _my_volunteer(request)
    ensure_not_frozen(
        FestivalSettings.load().profile_freeze_date,
        message="Sports selection updates are frozen",
    )
    data = VolunteerSportForm(json_body(request)).validated()
    volunteer.sport = _sport_or_none(data.get("sportId"))
    volunteer.save(update_fields=["sport", "updated_at"])
    return json_response(volunteer_to_dict(volunteer))


# ---------- Administración ----------

@api_view(["PATCH", "DELETE"])
def volunteer_detail(request: HttpRequest, pk: int):
    require_role(authenticate_request(request), *VOLUNTEER_MANAGERS)
    volunteer = get_or_404(_queryset(), "Volunteer not found", pk=pk)

    if request.method == "DELETE":
        with transaction.atomic():
            volunteer.user.delete()
        return json_response({"success": True})

    data = VolunteerForm(json_body(request), partial=True).provided()
    user = volunteer.user
    if data.get("username") and data["username"] != user.username:
        ensure_username_available(data["username"], exclude_pk=user.pk)
        user.username = data["username"]
    if data.get("email"):
        user.email = data["email"]
    if data.get("password"):
        user.set_password(data["password"])
    if "sportId" in data:
        volunteer.sport = _sport_or_none(data["sportId"])
    if "departmentId" in data:
        volunteer.department = _department_or_none(data["departmentId"])
    _apply(volunteer, data)

    with transaction.atomic():
        user.save()
        volunteer.save()
    return json_response(volunteer_to_dict(volunteer))


@api_view(["GET"])
@role_required(*VOLUNTEER_MANAGERS)
def volunteers_export(request: HttpRequest, fmt: str):
    rows = [volunteer_export_row(v) for v in _queryset()]
    return export_response(rows, VOLUNTEER_EXPORT_HEADERS, fmt, "volunteers")


# ---------- Departamentos ----------

@api_view(["GET", "POST"])
@token_required
def departments_collection(request: HttpRequest):
    if request.method == "POST":
        require_role(request.user, Profile.ROLE_ADMIN)
        data = DepartmentForm(json_body(request)).validated()
        if Department.objects.filter(name__iexact=data["name"]).exists():
            raise Conflict("Department already exists")
        department = Department.objects.create(name=data["name"])
        return json_response(department_to_dict(department), status=201)
    return json_response([department_to_dict(d) for d in Department.objects.all()])
