from __future__ import annotations

import logging

from django.db import transaction
from django.http import HttpRequest

from festcore.apps.accounts.auth import authenticate_request, ensure_profile, require_role
from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.services import provision_scoped_admin
from festcore.apps.core.errors import AccessDenied, Conflict
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response

from .forms import CommunityContactFieldsForm, CommunityForm, ContactForm
from .models import Community, CommunityContact
from .serializers import community_detail, community_to_dict, contact_to_dict

logger = logging.getLogger(__name__)

FIELD_MAP = {
    "name": "name",
    "active": "active",
    "contactPerson": "contact_person",
    "phone": "phone",
    "email": "email",
}


# ---------- Utilidades ----------

def _ensure_unique(name: str | None, email: str | None, exclude_pk: int | None = None) -> None:
    qs = Community.objects.all()
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    if name and qs.filter(name__iexact=name).exists():
        raise Conflict("Community with this name or email already exists")
    if email and qs.filter(email__iexact=email).exists():
        raise Conflict("Community with this name or email already exists")


def _require_community_manager(request: HttpRequest, community_id: int) -> Profile:
    """Admin, o community_admin de esa misma comunidad."""
    user = authenticate_request(request)
    profile = require_role(user, Profile.ROLE_ADMIN, Profile.ROLE_COMMUNITY_ADMIN)
    if profile.role == Profile.ROLE_COMMUNITY_ADMIN and profile.community_id != community_id:
        raise AccessDenied("Access denied")
    return profile


def _provision_admin(community: Community, data: dict) -> None:
    provision_scoped_admin(
        role=Profile.ROLE_COMMUNITY_ADMIN,
        community=community,
        username=data.get("adminUsername") or "",
        email=data.get("adminEmail") or "",
        password=data.get("adminPassword") or "",
    )


# ---------- Comunidades ----------

@api_view(["GET", "POST"])
def communities_collection(request: HttpRequest):
    if request.method == "GET":
        # Público: lo usa la página de registro
        return json_response([community_to_dict(c) for c in Community.objects.all()])

    authenticate_request(request)
    require_role(request.user, Profile.ROLE_ADMIN)
    form = CommunityForm(json_body(request))
    data = form.validated()
    _ensure_unique(data["name"], data["email"])

    with transaction.atomic():
        community = Community.objects.create(
            name=data["name"].strip(),
            active=data["active"] if "active" in form.data else True,
            contact_person=data["contactPerson"],
            phone=data["phone"],
            email=data["email"],
        )
        _provision_admin(community, data)
    logger.info("Comunidad creada: %s", community.name)
    return json_response(community_detail(community), status=201)


@api_view(["GET", "PATCH", "DELETE"])
def community_detail_view(request: HttpRequest, pk: int):
    user = authenticate_request(request)
    community = get_or_404(Community.objects, "Community not found", pk=pk)

    if request.method == "GET":
        return json_response(community_detail(community))

    profile = ensure_profile(user)

    if request.method == "DELETE":
        require_role(user, Profile.ROLE_ADMIN)
        if community.participants.exists():
            raise Conflict("Community has registered participants and cannot be deleted")
        community.delete()
        return json_response({"success": True})

    # PATCH
    if profile.role == Profile.ROLE_COMMUNITY_ADMIN and profile.community_id == community.pk:
        data = CommunityContactFieldsForm(json_body(request), partial=True).provided()
    else:
        require_role(user, Profile.ROLE_ADMIN)
        data = CommunityForm(json_body(request), partial=True).provided()

    _ensure_unique(data.get("name"), data.get("email"), exclude_pk=community.pk)
    with transaction.atomic():
        for key, attr in FIELD_MAP.items():
            if key not in data or (key != "active" and not data[key]):
                continue
            setattr(community, attr, data[key])
        community.save()
        _provision_admin(community, data)
    return json_response(community_detail(community))


# ---------- Contactos de comunidad ----------

@api_view(["GET", "POST"])
def community_contacts(request: HttpRequest, community_id: int):
    if request.method == "GET":
        authenticate_request(request)
        community = get_or_404(Community.objects, "Community not found", pk=community_id)
        return json_response([contact_to_dict(x) for x in community.contacts.all()])

    _require_community_manager(request, community_id)
    community = get_or_404(Community.objects, "Community not found", pk=community_id)
    data = ContactForm(json_body(request)).validated()
    contact = CommunityContact.objects.create(community=community, **data)
    return json_response(contact_to_dict(contact), status=201)


@api_view(["PATCH", "DELETE"])
def community_contact_detail(request: HttpRequest, pk: int):
    authenticate_request(request)
    contact = get_or_404(CommunityContact.objects, "Contact not found", pk=pk)
    _require_community_manager(request, contact.community_id)

    if request.method == "DELETE":
        contact.delete()
        return json_response({"success": True})

    data = ContactForm(json_body(request), partial=True).provided()
    for key, value in data.items():
        if value:
            setattr(contact, key, value)
    contact.save()
    return json_response(contact_to_dict(contact))
