from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from festcore.apps.core.exports import iso

from .models import FestivalSettings, Participant


def age_on(dob: date, reference: date) -> int:
    return reference.year - dob.year - ((reference.month, reference.day) < (dob.month, dob.day))


def participant_to_dict(p: Participant, reference: Optional[date] = None) -> Dict[str, Any]:
    links = p.sport_links.select_related("sport", "sport__parent")
    return {
        "id": p.pk,
        "userId": p.user_id,
        "username": p.user.username,
        "firstName": p.first_name,
        "middleName": p.middle_name or None,
        "lastName": p.last_name,
        "fullName": p.full_name,
        "gender": p.gender,
        "dob": p.dob,
        "age": age_on(p.dob, reference) if reference else None,
        "email": p.email,
        "phone": p.phone,
        "communityId": p.community_id,
        "community": {"id": p.community.pk, "name": p.community.name},
        "status": p.status,
        "nextOfKin": p.next_of_kin,
        "teamName": p.team_name or None,
        "notes": p.notes or None,
        "pendingSports": p.pending_sports,
        "sports": [
            {
                "sportId": link.sport_id,
                "name": link.sport.name,
                "displayName": link.sport.display_name,
                "parentId": link.sport.parent_id,
                "notes": link.notes or None,
            }
            for link in links
        ],
        "createdAt": p.created_at,
        "updatedAt": p.updated_at,
    }


PARTICIPANT_EXPORT_HEADERS = [
    "id", "firstName", "middleName", "lastName", "gender", "dob", "age", "email", "phone",
    "community", "status", "sports", "teamName", "nextOfKinName", "nextOfKinPhone",
    "paymentDetails", "createdAt",
]


def participant_export_row(p: Participant, reference: date) -> Dict[str, Any]:
    kin = p.next_of_kin or {}
    kin_name = " ".join(x for x in (kin.get("firstName"), kin.get("middleName"), kin.get("lastName")) if x)
    return {
        "id": p.pk,
        "firstName": p.first_name,
        "middleName": p.middle_name,
        "lastName": p.last_name,
        "gender": p.gender,
        "dob": iso(p.dob),
        "age": age_on(p.dob, reference),
        "email": p.email,
        "phone": p.phone,
        "community": p.community.name,
        "status": p.status,
        "sports": [link.sport.display_name for link in p.sport_links.select_related("sport", "sport__parent")],
        "teamName": p.team_name,
        "nextOfKinName": kin_name,
        "nextOfKinPhone": kin.get("phone", ""),
        "paymentDetails": p.notes,
        "createdAt": iso(p.created_at),
    }


def settings_to_dict(s: FestivalSettings) -> Dict[str, Any]:
    return {
        "id": s.pk,
        "ageCalculatorDate": s.age_calculator_date,
        "profileFreezeDate": s.profile_freeze_date,
        "updatedAt": s.updated_at,
    }
