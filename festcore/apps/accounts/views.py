from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth.models import User
from django.http import HttpRequest
from django.db import transaction

from festcore.apps.communities.models import Community
from festcore.apps.core.errors import AccessDenied, AuthenticationFailed
from festcore.apps.core.exports import export_response
from festcore.apps.core.http import api_view, get_or_404, json_body, json_response
from festcore.apps.sports.models import Sport

from .auth import ensure_profile, role_required, token_required
from .forms import LoginForm, SignupForm, UserForm
from .models import Profile
from .serializers import USER_EXPORT_HEADERS, user_export_row, user_to_dict
from .services import create_account, ensure_username_available, find_login_user
from .tokens import issue_token

logger = logging.getLogger(__name__)


# ---------- Utilidades ----------

def _check_credentials(identifier: str, password: str) -> User:
    user = find_login_user(identifier)
    if user is None or not user.is_active or not user.check_password(password):
        logger.info("Login fallido para '%s'", identifier)
        raise AuthenticationFailed("Invalid credentials")
    return user


def _login_payload(user: User, status: int = 200):
    profile = ensure_profile(user)
    token = issue_token(user, profile.role)
    return json_response({"user": user_to_dict(user), "token": token}, status=status)


def _resolve_scope(community_id: Optional[int], sport_id: Optional[int]):
    community = get_or_404(Community.objects, "Community not found", pk=community_id) if community_id else None
    sport = get_or_404(Sport.objects, "Sport not found", pk=sport_id) if sport_id else None
    return community, sport


# ---------- Autenticación ----------

@api_view(["POST"])
def login(request: HttpRequest):
    data = LoginForm(json_body(request)).validated()
    user = _check_credentials(data["username"], data["password"])
    logger.info("Login OK: %s", user.username)
    return _login_payload(user)


def _scoped_login(request: HttpRequest, role: str, scope: Optional[str] = None):
    """
    Variante de login que sólo acepta usuarios con 'role'.
    Para admins de comunidad/deporte exige que el alcance exista y esté activo
    y, si el cliente envía communityId/sportId, que coincida.
    """
    data = LoginForm(json_body(request)).validated()
    user = _check_credentials(data["username"], data["password"])
    profile = ensure_profile(user)
    if profile.role != role:
        logger.info("Login %s rechazado para %s (rol %s)", role, user.username, profile.role)
        raise AccessDenied("Insufficient permissions")

    if scope == "community":
        community = profile.community
        if community is None or not community.active:
            raise AccessDenied("Community is not active or not linked to this account")
        if data.get("communityId") and data["communityId"] != community.pk:
            raise AccessDenied("Account is not an admin of this community")
    elif scope == "sport":
        sport = profile.sport
        if sport is None or not sport.active:
            raise AccessDenied("Sport is not active or not linked to this account")
        if data.get("sportId") and data["sportId"] != sport.pk:
            raise AccessDenied("Account is not an admin of this sport")

    logger.info("Login %s OK: %s", role, user.username)
    return _login_payload(user)


@api_view(["POST"])
def community_admin_login(request: HttpRequest):
    return _scoped_login(request, Profile.ROLE_COMMUNITY_ADMIN, scope="community")


@api_view(["POST"])
def sports_admin_login(request: HttpRequest):
    return _scoped_login(request, Profile.ROLE_SPORTS_ADMIN, scope="sport")


@api_view(["POST"])
def volunteer_admin_login(request: HttpRequest):
    return _scoped_login(request, Profile.ROLE_VOLUNTEER_ADMIN)


@api_view(["POST"])
def volunteer_login(request: HttpRequest):
    return _scoped_login(request, Profile.ROLE_VOLUNTEER)


@api_view(["GET"])
@token_required
def me(request: HttpRequest):
    return json_response(user_to_dict(request.user))


@api_view(["POST"])
@token_required
def logout(request: HttpRequest):
    # Tokens sin estado: el cliente descarta el token
    return json_response({"message": "Logged out successfully"})


@api_view(["POST"])
def signup(request: HttpRequest):
    data = SignupForm(json_body(request)).validated()
    role = Profile.ROLE_COMMUNITY_ADMIN if data["role"] == "community" else Profile.ROLE_VOLUNTEER
    community, _ = _resolve_scope(data.get("communityId"), None)
    with transaction.atomic():
        user = create_account(
            username=data["username"].strip(),
            password=data["password"],
            role=role,
            community=community,
        )
    logger.info("Signup %s (%s)", user.username, role)
    return _login_payload(user, status=201)


# ---------- Usuarios (admin) ----------

@api_view(["GET", "POST"])
@role_required(Profile.ROLE_ADMIN)
def users_collection(request: HttpRequest):
    if request.method == "POST":
        data = UserForm(json_body(request)).validated()
        community, sport = _resolve_scope(data.get("communityId"), data.get("sportId"))
        with transaction.atomic():
            user = create_account(
                username=data["username"].strip(),
                password=data["password"],
                role=data["role"],
                email=data.get("email") or "",
                community=community,
                sport=sport,
            )
        return json_response(user_to_dict(user), status=201)

    users = User.objects.select_related("profile", "profile__community", "profile__sport").order_by("-date_joined")
    return json_response([user_to_dict(u) for u in users])


@api_view(["GET", "PATCH", "DELETE"])
@role_required(Profile.ROLE_ADMIN)
def user_detail(request: HttpRequest, pk: int):
    user = get_or_404(User.objects.select_related("profile"), "User not found", pk=pk)

    if request.method == "GET":
        return json_response(user_to_dict(user))

    if request.method == "DELETE":
        user.delete()
        return json_response({"success": True})

    data = UserForm(json_body(request), partial=True).provided()
    profile = ensure_profile(user)
    with transaction.atomic():
        if data.get("username"):
            username = data["username"].strip()
            ensure_username_available(username, exclude_pk=user.pk)
            user.username = username
        if "email" in data:
            user.email = data["email"] or ""
        if data.get("password"):
            user.set_password(data["password"])
        user.save()

        if data.get("role"):
            profile.role = data["role"]
        if "communityId" in data:
            profile.community, _ = _resolve_scope(data["communityId"], None)
        if "sportId" in data:
            _, profile.sport = _resolve_scope(None, data["sportId"])
        profile.save()
    return json_response(user_to_dict(user))


@api_view(["GET"])
@role_required(Profile.ROLE_ADMIN)
def users_export(request: HttpRequest, fmt: str):
    users = User.objects.select_related(
        "profile", "profile__community", "profile__sport", "profile__sport__parent"
    ).order_by("-date_joined")
    rows = [user_export_row(u) for u in users]
    return export_response(rows, USER_EXPORT_HEADERS, fmt, "users")
