from __future__ import annotations

from django.http import HttpRequest

from festcore.apps.accounts.auth import authenticate_request, require_role, token_required
from festcore.apps.accounts.models import Profile
from festcore.apps.core.errors import Conflict, NotFound
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response

from .forms import CalendarItemForm, TournamentFormatForm
from .models import CalendarItem, Sport, TournamentFormat
from .serializers import calendar_item_to_dict, format_to_dict


# ---------- Formatos de torneo ----------

def _ensure_category_free(category: str, exclude_pk=None) -> None:
    qs = TournamentFormat.objects.filter(category__iexact=category)
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict("A format with this category already exists")


@api_view(["GET", "POST"])
def formats_collection(request: HttpRequest):
    if request.method == "GET":
        return json_response([format_to_dict(f) for f in TournamentFormat.objects.all()])

    require_role(authenticate_request(request), Profile.ROLE_ADMIN)
    data = TournamentFormatForm(json_body(request)).validated()
    _ensure_category_free(data["category"])
    fmt = TournamentFormat.objects.create(**data)
    return json_response(format_to_dict(fmt), status=201)


@api_view(["GET"])
def format_by_category(request: HttpRequest, category: str):
    fmt = TournamentFormat.objects.filter(category__iexact=category).first()
    if fmt is None:
        raise NotFound("Tournament format not found")
    return json_response(format_to_dict(fmt))


@api_view(["GET", "PATCH", "DELETE"])
def format_detail(request: HttpRequest, pk: int):
    fmt = get_or_404(TournamentFormat.objects, "Tournament format not found", pk=pk)
    if request.method == "GET":
        return json_response(format_to_dict(fmt))

    require_role(authenticate_request(request), Profile.ROLE_ADMIN)
    if request.method == "DELETE":
        fmt.delete()
        return json_response({"success": True})

    data = TournamentFormatForm(json_body(request), partial=True).provided()
    if data.get("category"):
        _ensure_category_free(data["category"], exclude_pk=fmt.pk)
    for key, value in data.items():
        if value:
            setattr(fmt, key, value)
    fmt.save()
    return json_response(format_to_dict(fmt))


# ---------- Calendario ----------

@api_view(["GET", "POST"])
def calendar_collection(request: HttpRequest):
    user = authenticate_request(request)
    if request.method == "GET":
        items = CalendarItem.objects.select_related("sport", "sport__parent")
        return json_response([calendar_item_to_dict(i) for i in items])

    require_role(user, Profile.ROLE_ADMIN)
    data = CalendarItemForm(json_body(request)).validated()
    sport = get_or_404(Sport.objects, "Sport not found", pk=data.pop("sportId"))
    item = CalendarItem.objects.create(sport=sport, **data)
    return json_response(calendar_item_to_dict(item), status=201)


@api_view(["GET"])
@token_required
def calendar_timing(request: HttpRequest):
    rows = CalendarItem.objects.values("sport_id", "time", "date", "venue")
    return json_response(
        [{"sportId": r["sport_id"], "time": r["time"], "date": r["date"], "venue": r["venue"]} for r in rows]
    )


@api_view(["PATCH", "DELETE"])
def calendar_item_detail(request: HttpRequest, pk: int):
    require_role(authenticate_request(request), Profile.ROLE_ADMIN)
    item = get_or_404(CalendarItem.objects.select_related("sport"), "Calendar item not found", pk=pk)

    if request.method == "DELETE":
        item.delete()
        return json_response({"success": True})

    data = CalendarItemForm(json_body(request), partial=True).provided()
    if data.get("sportId"):
        item.sport = get_or_404(Sport.objects, "Sport not found", pk=data.pop("sportId"))
    for key in ("date", "time", "venue", "type"):
        if data.get(key):
            setattr(item, key, data[key])
    item.save()
    return json_response(calendar_item_to_dict(item))
