from __future__ import annotations

from typing import Any, Dict, Optional

from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.services import scoped_admin_for

from .models import CalendarItem, Convenor, Sport, TournamentFormat
from .services.taxonomy import incompatible_ids_for


def sport_to_dict(s: Sport) -> Dict[str, Any]:
    return {
        "id": s.pk,
        "name": s.name,
        "displayName": s.display_name,
        "type": s.type,
        "requiresTeamName": s.requires_team_name,
        "parentId": s.parent_id,
        "active": s.active,
        "venue": s.venue or None,
        "timings": s.timings or None,
        "date": s.date,
        "gender": s.gender,
        "ageLimitMin": s.age_limit_min,
        "ageLimitMax": s.age_limit_max,
        "rules": s.rules or None,
        "createdAt": s.created_at,
        "updatedAt": s.updated_at,
    }


def sport_brief(s: Optional[Sport]) -> Optional[Dict[str, Any]]:
    if s is None:
        return None
    return {"id": s.pk, "name": s.name, "parentId": s.parent_id, "displayName": s.display_name}


def sport_detail(s: Sport) -> Dict[str, Any]:
    data = sport_to_dict(s)
    data["parent"] = sport_brief(s.parent) if s.parent_id else None
    data["children"] = [sport_to_dict(c) for c in s.children.all()]
    data["incompatibleSportIds"] = incompatible_ids_for(s)
    convenor = Convenor.objects.filter(sport=s).first()
    data["convenor"] = convenor_to_dict(convenor, with_sport=False) if convenor else None
    admin_user = scoped_admin_for(role=Profile.ROLE_SPORTS_ADMIN, sport=s)
    data["adminUsername"] = admin_user.username if admin_user else None
    data["adminEmail"] = (admin_user.email or None) if admin_user else None
    return data


def convenor_to_dict(c: Convenor, with_sport: bool = True) -> Dict[str, Any]:
    data = {
        "id": c.pk,
        "name": c.name,
        "phone": c.phone,
        "email": c.email,
        "sportId": c.sport_id,
        "createdAt": c.created_at,
        "updatedAt": c.updated_at,
    }
    if with_sport:
        data["sport"] = sport_brief(c.sport)
    return data


def format_to_dict(f: TournamentFormat) -> Dict[str, Any]:
    return {
        "id": f.pk,
        "category": f.category,
        "title": f.title,
        "content": f.content,
        "createdAt": f.created_at,
        "updatedAt": f.updated_at,
    }


def calendar_item_to_dict(item: CalendarItem) -> Dict[str, Any]:
    return {
        "id": item.pk,
        "sportId": item.sport_id,
        "sport": sport_brief(item.sport),
        "date": item.date,
        "time": item.time,
        "venue": item.venue,
        "type": item.type,
        "createdAt": item.created_at,
        "updatedAt": item.updated_at,
    }
