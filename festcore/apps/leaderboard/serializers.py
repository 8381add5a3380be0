from __future__ import annotations

from typing import Any, Dict

from .models import LeaderboardEntry


def entry_to_dict(e: LeaderboardEntry) -> Dict[str, Any]:
    return {
        "id": e.pk,
        "communityId": e.community_id,
        "communityName": e.community.name,
        "community": {"id": e.community.pk, "name": e.community.name, "active": e.community.active},
        "sportId": e.sport_id,
        "sportName": e.sport.display_name,
        "sport": {"id": e.sport.pk, "name": e.sport.name},
        "score": e.score,
        "position": e.position,
        "medalType": e.medal_type,
        "notes": e.notes or None,
        "createdAt": e.created_at,
        "updatedAt": e.updated_at,
    }
