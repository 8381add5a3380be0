from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth.models import User
from django.db.models import Q

from festcore.apps.core.errors import Conflict, ValidationFailed

from .models import Profile

logger = logging.getLogger(__name__)


def find_login_user(identifier: str) -> Optional[User]:
    """Busca por username exacto o por email (sin distinguir mayúsculas)."""
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    return (
        User.objects.select_related("profile")
        .filter(Q(username=identifier) | Q(email__iexact=identifier))
        .order_by("pk")
        .first()
    )


def ensure_username_available(username: str, exclude_pk: Optional[int] = None) -> None:
    qs = User.objects.filter(username=username)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict("Username already exists")


def create_account(
    *,
    username: str,
    password: str,
    role: str,
    email: str = "",
    first_name: str = "",
    last_name: str = "",
    community=None,
    sport=None,
) -> User:
    ensure_username_available(username)
    user = User(username=username, email=email or "", first_name=first_name, last_name=last_name)
    user.set_password(password)
    user.save()
    Profile.objects.update_or_create(
        user=user, defaults={"role": role, "community": community, "sport": sport}
    )
    return user


def provision_scoped_admin(
    *,
    role: str,
    community=None,
    sport=None,
    username: str = "",
    email: str = "",
    password: str = "",
) -> Optional[User]:
    """
    Crea o actualiza el login de administrador ligado por FK a una comunidad
    (community_admin) o a un deporte (sports_admin).
    Sin credenciales en el payload no hace nada.
    """
    username = (username or "").strip()
    email = (email or "").strip()
    if not (username or email or password):
        return None

    scope = {"community": community} if community is not None else {"sport": sport}
    profile = (
        Profile.objects.select_related("user")
        .filter(role=role, **scope)
        .order_by("pk")
        .first()
    )

    if profile is None:
        if not password:
            raise ValidationFailed(
                "adminPassword is required to create the admin login",
                details={"adminPassword": ["adminPassword is required"]},
            )
        user = create_account(
            username=username or email,
            password=password,
            role=role,
            email=email,
            community=community,
            sport=sport,
        )
        logger.info("Admin %s creado para %s", user.username, community or sport)
        return user

    user = profile.user
    if username and username != user.username:
        ensure_username_available(username, exclude_pk=user.pk)
        user.username = username
    if email:
        user.email = email
    if password:
        user.set_password(password)
    user.save()
    logger.info("Admin %s actualizado para %s", user.username, community or sport)
    return user


def scoped_admin_for(*, role: str, community=None, sport=None) -> Optional[User]:
    scope = {"community": community} if community is not None else {"sport": sport}
    profile = Profile.objects.select_related("user").filter(role=role, **scope).order_by("pk").first()
    return profile.user if profile else None
