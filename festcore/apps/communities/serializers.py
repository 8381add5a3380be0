from __future__ import annotations

from typing import Any, Dict

from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.services import scoped_admin_for

from .models import Community, CommunityContact


def community_to_dict(c: Community) -> Dict[str, Any]:
    return {
        "id": c.pk,
        "name": c.name,
        "active": c.active,
        "contactPerson": c.contact_person,
        "phone": c.phone,
        "email": c.email,
        "createdAt": c.created_at,
        "updatedAt": c.updated_at,
    }


def community_detail(c: Community) -> Dict[str, Any]:
    data = community_to_dict(c)
    admin_user = scoped_admin_for(role=Profile.ROLE_COMMUNITY_ADMIN, community=c)
    data["adminUsername"] = admin_user.username if admin_user else None
    data["adminEmail"] = (admin_user.email or None) if admin_user else None
    data["contacts"] = [contact_to_dict(x) for x in c.contacts.all()]
    return data


def contact_to_dict(x: CommunityContact) -> Dict[str, Any]:
    return {
        "id": x.pk,
        "communityId": x.community_id,
        "name": x.name,
        "phone": x.phone,
        "email": x.email,
        "createdAt": x.created_at,
        "updatedAt": x.updated_at,
    }
