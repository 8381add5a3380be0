from __future__ import annotations

import re

from django import forms

from festcore.apps.core.forms import ApiForm, IdField

from .models import Profile

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_.-]+$")


def validate_username_format(value: str) -> None:
    if len(value) < 3:
        raise forms.ValidationError("Username must be at least 3 characters")
    if len(value) > 30:
        raise forms.ValidationError("Username must be at most 30 characters")
    if not USERNAME_RE.match(value):
        raise forms.ValidationError(
            "Username can only include letters, numbers, underscores, hyphens or dots"
        )


class LoginForm(ApiForm):
    username = forms.CharField()
    password = forms.CharField(strip=False)
    communityId = IdField(required=False)
    sportId = IdField(required=False)


class SignupForm(ApiForm):
    role = forms.ChoiceField(choices=(("community", "Community"), ("volunteer", "Volunteer")))
    username = forms.CharField(max_length=150)
    password = forms.CharField(strip=False)
    communityId = IdField(required=False)


class UserForm(ApiForm):
    username = forms.CharField(max_length=150)
    email = forms.EmailField(required=False)
    password = forms.CharField(strip=False, min_length=1)
    role = forms.ChoiceField(choices=Profile.ROLE_CHOICES)
    communityId = IdField(required=False)
    sportId = IdField(required=False)


class ScopedAdminForm(ApiForm):
    """Credenciales opcionales del admin de una comunidad o deporte."""

    adminUsername = forms.CharField(required=False, max_length=150)
    adminEmail = forms.EmailField(required=False)
    adminPassword = forms.CharField(required=False, strip=False, min_length=6)
