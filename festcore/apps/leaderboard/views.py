from __future__ import annotations

import logging

from django.http import HttpRequest

from festcore.apps.accounts.auth import role_required
from festcore.apps.accounts.models import Profile
from festcore.apps.communities.models import Community
from festcore.apps.core.errors import Conflict
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response
from festcore.apps.sports.models import Sport

from .forms import EntryForm
from .models import LeaderboardEntry
from .serializers import entry_to_dict
from .services import overall_standings, sport_standings

logger = logging.getLogger(__name__)


def _entries():
    return LeaderboardEntry.objects.select_related("community", "sport", "sport__parent")


def _apply(entry: LeaderboardEntry, data: dict) -> None:
    if data.get("score") is not None:
        entry.score = data["score"]
    if "position" in data:
        entry.position = data["position"]
    if data.get("medalType"):
        entry.medal_type = data["medalType"]
    if "notes" in data:
        entry.notes = data["notes"] or ""


# ---------- Lectura (pública) ----------

@api_view(["GET", "POST"])
def leaderboard(request: HttpRequest):
    if request.method == "POST":
        return _upsert(request)
    return json_response(overall_standings(_entries()))


@api_view(["GET"])
def sport_leaderboard(request: HttpRequest, sport_id: int):
    return json_response(sport_standings(_entries().filter(sport_id=sport_id)))


@api_view(["GET"])
def community_leaderboard(request: HttpRequest, community_id: int):
    entries = _entries().filter(community_id=community_id).order_by("-score", "sport__name")
    return json_response([entry_to_dict(e) for e in entries])


@api_view(["GET"])
@role_required(Profile.ROLE_ADMIN)
def entries(request: HttpRequest):
    return json_response([entry_to_dict(e) for e in _entries().order_by("-updated_at")])


# ---------- Escritura (admin) ----------

@role_required(Profile.ROLE_ADMIN)
def _upsert(request: HttpRequest):
    """Un registro por (comunidad, deporte): crea (201) o actualiza (200)."""
    form = EntryForm(json_body(request))
    data = form.validated()
    community = get_or_404(Community.objects, "Community not found", pk=data["communityId"])
    sport = get_or_404(Sport.objects, "Sport not found", pk=data["sportId"])

    entry = LeaderboardEntry.objects.filter(community=community, sport=sport).first()
    created = entry is None
    if created:
        entry = LeaderboardEntry(community=community, sport=sport)
    _apply(entry, {k: v for k, v in data.items() if k in form.data})
    entry.save()
    logger.info("Leaderboard %s: %s / %s = %s", "alta" if created else "edición", community, sport, entry.score)
    return json_response(entry_to_dict(entry), status=201 if created else 200)


@api_view(["PATCH", "DELETE"])
@role_required(Profile.ROLE_ADMIN)
def entry_detail(request: HttpRequest, pk: int):
    entry = get_or_404(_entries(), "Leaderboard entry not found", pk=pk)

    if request.method == "DELETE":
        entry.delete()
        return json_response({"success": True})

    data = EntryForm(json_body(request), partial=True).provided()
    if data.get("communityId"):
        entry.community = get_or_404(Community.objects, "Community not found", pk=data["communityId"])
    if data.get("sportId"):
        entry.sport = get_or_404(Sport.objects, "Sport not found", pk=data["sportId"])
    clash = LeaderboardEntry.objects.filter(community=entry.community, sport=entry.sport).exclude(pk=entry.pk)
    if clash.exists():
        raise Conflict("Entry already exists for this community and sport")
    _apply(entry, data)
    entry.save()
    return json_response(entry_to_dict(entry))
