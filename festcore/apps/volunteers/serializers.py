from __future__ import annotations

from typing import Any, Dict

from festcore.apps.core.exports import iso
from festcore.apps.sports.serializers import sport_brief

from .models import Department, Volunteer


def department_to_dict(d: Department) -> Dict[str, Any]:
    return {"id": d.pk, "name": d.name, "createdAt": d.created_at, "updatedAt": d.updated_at}


def volunteer_to_dict(v: Volunteer) -> Dict[str, Any]:
    return {
        "id": v.pk,
        "userId": v.user_id,
        "username": v.user.username,
        "firstName": v.first_name,
        "middleName": v.middle_name or None,
        "lastName": v.last_name,
        "gender": v.gender,
        "dob": v.dob,
        "email": v.email,
        "phone": v.phone,
        "departmentId": v.department_id,
        "department": department_to_dict(v.department) if v.department_id else None,
        "sportId": v.sport_id,
        "sport": sport_brief(v.sport) if v.sport_id else None,
        "createdAt": v.created_at,
        "updatedAt": v.updated_at,
    }


VOLUNTEER_EXPORT_HEADERS = [
    "id", "firstName", "middleName", "lastName", "gender", "dob", "email", "phone",
    "sport", "createdAt", "updatedAt",
]


def volunteer_export_row(v: Volunteer) -> Dict[str, Any]:
    return {
        "id": v.pk,
        "firstName": v.first_name,
        "middleName": v.middle_name or "-",
        "lastName": v.last_name,
        "gender": v.gender,
        "dob": iso(v.dob),
        "email": v.email,
        "phone": v.phone,
        "sport": v.sport.display_name if v.sport_id else "-",
        "createdAt": iso(v.created_at),
        "updatedAt": iso(v.updated_at),
    }
