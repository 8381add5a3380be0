from __future__ import annotations

import logging

from django.db import transaction
from django.http import HttpRequest

from festcore.apps.accounts.auth import authenticate_request, require_role
from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.services import provision_scoped_admin
from festcore.apps.core.errors import AccessDenied
from festcore.apps.core.forms import full_clean_or_400
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response

from .forms import SPORT_FIELDS, IncompatibilitiesForm, SportForm
from .models import Sport
from .serializers import sport_detail, sport_to_dict
from .services.taxonomy import set_incompatibilities

logger = logging.getLogger(__name__)

SPORT_MANAGERS = (Profile.ROLE_ADMIN, Profile.ROLE_SPORTS_ADMIN)


# ---------- Utilidades ----------

def in_sport_scope(profile: Profile, sport: Sport) -> bool:
    """admin: todo; sports_admin: su deporte y los hijos de su deporte."""
    if profile.role == Profile.ROLE_ADMIN:
        return True
    if profile.role != Profile.ROLE_SPORTS_ADMIN or not profile.sport_id:
        return False
    return sport.pk == profile.sport_id or sport.parent_id == profile.sport_id


def _require_manager(request: HttpRequest) -> Profile:
    user = authenticate_request(request)
    return require_role(user, *SPORT_MANAGERS)


def _apply(sport: Sport, data: dict) -> None:
    for key, attr in SPORT_FIELDS.items():
        if key not in data:
            continue
        value = data[key]
        if key in ("gender", "date", "parentId") and value in ("", None):
            value = None
        elif key in ("venue", "timings", "rules") and value is None:
            value = ""
        elif key == "name" and not value:
            continue
        elif key == "type" and not value:
            continue
        setattr(sport, attr, value)


def _check_parent(data: dict) -> None:
    if data.get("parentId"):
        get_or_404(Sport.objects, "Parent sport not found", pk=data["parentId"])


def _provision_admin(sport: Sport, data: dict) -> None:
    provision_scoped_admin(
        role=Profile.ROLE_SPORTS_ADMIN,
        sport=sport,
        username=data.get("adminUsername") or "",
        email=data.get("adminEmail") or "",
        password=data.get("adminPassword") or "",
    )


# ---------- Lectura (pública) ----------

@api_view(["GET", "POST"])
def sports_collection(request: HttpRequest):
    if request.method == "POST":
        return _create_sport(request)
    sports = Sport.objects.select_related("parent").all()
    return json_response([sport_to_dict(s) for s in sports])


@api_view(["GET"])
def sports_tree(request: HttpRequest):
    all_sports = list(Sport.objects.select_related("parent").all())
    tree = [
        {
            "parent": sport_to_dict(parent),
            "children": [sport_to_dict(s) for s in all_sports if s.parent_id == parent.pk],
        }
        for parent in all_sports
        if parent.parent_id is None
    ]
    return json_response(tree)


@api_view(["GET"])
def subsports(request: HttpRequest, parent_id: int):
    children = Sport.objects.select_related("parent").filter(parent_id=parent_id)
    return json_response([sport_to_dict(s) for s in children])


# ---------- Escritura ----------

def _create_sport(request: HttpRequest):
    profile = _require_manager(request)
    form = SportForm(json_body(request))
    data = form.validated()
    _check_parent(data)

    if profile.role == Profile.ROLE_SPORTS_ADMIN and data.get("parentId") != profile.sport_id:
        raise AccessDenied("Sports admins can only add sub-sports to their own sport")

    sport = Sport(active=True)
    _apply(sport, {k: v for k, v in data.items() if k in form.data})
    full_clean_or_400(sport)
    with transaction.atomic():
        sport.save()
        _provision_admin(sport, data)
    logger.info("Deporte creado: %s", sport.display_name)
    return json_response(sport_detail(sport), status=201)


@api_view(["GET", "PATCH", "DELETE"])
def sport_detail_view(request: HttpRequest, pk: int):
    sport = get_or_404(Sport.objects.select_related("parent"), "Sport not found", pk=pk)
    if request.method == "GET":
        return json_response(sport_detail(sport))

    profile = _require_manager(request)
    if not in_sport_scope(profile, sport):
        raise AccessDenied("Access denied")

    if request.method == "DELETE":
        # Hijos, inscripciones, incompatibilidades, leaderboard y calendario caen en cascada
        name = sport.display_name
        sport.delete()
        logger.info("Deporte eliminado: %s", name)
        return json_response({"success": True})

    data = SportForm(json_body(request), partial=True).provided()
    _check_parent(data)
    if profile.role == Profile.ROLE_SPORTS_ADMIN and "parentId" in data and data["parentId"] != sport.parent_id:
        raise AccessDenied("Sports admins cannot move sports in the taxonomy")

    _apply(sport, data)
    if sport.parent_id:
        sport.parent = Sport.objects.get(pk=sport.parent_id)
    full_clean_or_400(sport)
    with transaction.atomic():
        sport.save()
        _provision_admin(sport, data)
    return json_response(sport_detail(sport))


@api_view(["PUT"])
def sport_incompatibilities(request: HttpRequest, pk: int):
    profile = _require_manager(request)
    sport = get_or_404(Sport.objects.select_related("parent"), "Sport not found", pk=pk)
    if not in_sport_scope(profile, sport):
        raise AccessDenied("Access denied")
    data = IncompatibilitiesForm(json_body(request)).validated()
    set_incompatibilities(sport, data["sportIds"])
    return json_response(sport_detail(sport))
