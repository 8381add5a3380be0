from __future__ import annotations

from functools import wraps

from django.contrib.auth.models import User
from django.http import HttpRequest

from festcore.apps.core.errors import AccessDenied, AuthenticationFailed

from .models import Profile
from .tokens import decode_token


# ---------- Perfil / rol ----------

def ensure_profile(user: User) -> Profile:
    try:
        return user.profile
    except Profile.DoesNotExist:
        role = Profile.ROLE_ADMIN if user.is_superuser else Profile.ROLE_USER
        profile, _ = Profile.objects.get_or_create(user=user, defaults={"role": role})
        return profile


def role_of(user: User) -> str:
    return ensure_profile(user).role


# ---------- Bearer token ----------

def authenticate_request(request: HttpRequest) -> User:
    """
    Resuelve 'Authorization: Bearer <token>' a un User activo y lo deja en request.user.
    Falta de token, token inválido/expirado o usuario borrado -> 401.
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationFailed("No token provided")

    payload = decode_token(token.strip())
    try:
        user = User.objects.select_related(
            "profile", "profile__community", "profile__sport"
        ).get(pk=int(payload.get("sub")))
    except (User.DoesNotExist, TypeError, ValueError):
        raise AuthenticationFailed("User not found")
    if not user.is_active:
        raise AuthenticationFailed("User not found")

    request.user = user
    return user


def require_role(user: User, *roles: str) -> Profile:
    profile = ensure_profile(user)
    if profile.role not in roles:
        raise AccessDenied("Insufficient permissions")
    return profile


def token_required(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        authenticate_request(request)
        return view(request, *args, **kwargs)
    return wrapper


def role_required(*roles: str):
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            user = authenticate_request(request)
            require_role(user, *roles)
            return view(request, *args, **kwargs)
        return wrapper
    return decorator
