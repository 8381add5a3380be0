from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .models import LeaderboardEntry
from .serializers import entry_to_dict


def overall_standings(entries: Iterable[LeaderboardEntry]) -> List[Dict[str, Any]]:
    """
    Suma de puntajes por comunidad, ordenada de mayor a menor.
    Empates: por nombre de comunidad. rank = posición en la lista (1..n).
    """
    totals: Dict[int, Dict[str, Any]] = {}
    for entry in entries:
        row = totals.setdefault(
            entry.community_id,
            {
                "communityId": entry.community_id,
                "communityName": entry.community.name,
                "totalScore": 0,
                "entryCount": 0,
            },
        )
        row["totalScore"] += entry.score
        row["entryCount"] += 1

    ordered = sorted(totals.values(), key=lambda r: (-r["totalScore"], r["communityName"].casefold()))
    for rank, row in enumerate(ordered, start=1):
        row["rank"] = rank
    return ordered


def sport_standings(entries: Iterable[LeaderboardEntry]) -> List[Dict[str, Any]]:
    out = []
    for rank, entry in enumerate(entries, start=1):
        row = entry_to_dict(entry)
        row["rank"] = rank
        out.append(row)
    return out
