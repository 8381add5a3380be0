from __future__ import annotations

from typing import Any, Dict

from django.contrib.auth.models import User

from festcore.apps.core.exports import iso

from .auth import ensure_profile


def user_to_dict(user: User) -> Dict[str, Any]:
    """Usuario sin hash de contraseña, con su rol y alcance."""
    profile = ensure_profile(user)
    community = profile.community
    sport = profile.sport
    return {
        "id": user.pk,
        "username": user.username,
        "email": user.email or None,
        "role": profile.role,
        "communityId": profile.community_id,
        "sportId": profile.sport_id,
        "community": {"id": community.pk, "name": community.name} if community else None,
        "sport": {"id": sport.pk, "name": sport.name, "parentId": sport.parent_id} if sport else None,
        "createdAt": user.date_joined,
        "updatedAt": profile.updated_at,
    }


USER_EXPORT_HEADERS = ["id", "username", "email", "role", "community", "sport", "createdAt", "updatedAt"]


def user_export_row(user: User) -> Dict[str, Any]:
    profile = ensure_profile(user)
    return {
        "id": user.pk,
        "username": user.username,
        "email": user.email or "",
        "role": profile.role,
        "community": profile.community.name if profile.community else "-",
        "sport": profile.sport.display_name if profile.sport else "-",
        "createdAt": iso(user.date_joined),
        "updatedAt": iso(profile.updated_at),
    }
