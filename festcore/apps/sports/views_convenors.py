from __future__ import annotations

from django.http import HttpRequest

from festcore.apps.accounts.auth import authenticate_request, require_role
from festcore.apps.accounts.models import Profile
from festcore.apps.core.errors import AccessDenied, Conflict, NotFound
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response

from .forms import ConvenorForm
from .models import Convenor, Sport
from .serializers import convenor_to_dict
from .views import SPORT_MANAGERS, in_sport_scope


def _target_sport(profile: Profile, sport_id, exclude_pk=None):
    """Valida el deporte destino: existe, está en alcance y no tiene otro convenor."""
    if not sport_id:
        return None
    sport = get_or_404(Sport.objects, "Sport not found", pk=sport_id)
    if not in_sport_scope(profile, sport):
        raise AccessDenied("Access denied")
    qs = Convenor.objects.filter(sport=sport)
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict("This sport already has a convenor")
    return sport


@api_view(["GET", "POST"])
def convenors_collection(request: HttpRequest):
    if request.method == "GET":
        convenors = Convenor.objects.select_related("sport", "sport__parent")
        return json_response([convenor_to_dict(c) for c in convenors])

    profile = require_role(authenticate_request(request), *SPORT_MANAGERS)
    data = ConvenorForm(json_body(request)).validated()
    sport = _target_sport(profile, data.get("sportId"))
    if sport is None and profile.role == Profile.ROLE_SPORTS_ADMIN:
        raise AccessDenied("Sports admins must assign the convenor to one of their sports")
    convenor = Convenor.objects.create(
        name=data["name"], phone=data["phone"], email=data["email"], sport=sport
    )
    return json_response(convenor_to_dict(convenor), status=201)


@api_view(["GET"])
def convenor_by_sport(request: HttpRequest, sport_id: int):
    convenor = Convenor.objects.select_related("sport").filter(sport_id=sport_id).first()
    if convenor is None:
        raise NotFound("Convenor not found")
    return json_response(convenor_to_dict(convenor))


@api_view(["GET", "PATCH", "DELETE"])
def convenor_detail(request: HttpRequest, pk: int):
    convenor = get_or_404(Convenor.objects.select_related("sport"), "Convenor not found", pk=pk)
    if request.method == "GET":
        return json_response(convenor_to_dict(convenor))

    profile = require_role(authenticate_request(request), *SPORT_MANAGERS)
    if profile.role == Profile.ROLE_SPORTS_ADMIN and (
        convenor.sport is None or not in_sport_scope(profile, convenor.sport)
    ):
        raise AccessDenied("Access denied")

    if request.method == "DELETE":
        convenor.delete()
        return json_response({"success": True})

    data = ConvenorForm(json_body(request), partial=True).provided()
    if "sportId" in data:
        convenor.sport = _target_sport(profile, data["sportId"], exclude_pk=convenor.pk)
    for key in ("name", "phone", "email"):
        if data.get(key):
            setattr(convenor, key, data[key])
    convenor.save()
    return json_response(convenor_to_dict(convenor))
