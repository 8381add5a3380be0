from __future__ import annotations

from django import forms

from festcore.apps.accounts.forms import ScopedAdminForm
from festcore.apps.core.forms import ApiForm


class CommunityForm(ScopedAdminForm):
    name = forms.CharField(max_length=160)
    active = forms.BooleanField(required=False)
    contactPerson = forms.CharField(max_length=160)
    phone = forms.CharField(max_length=40)
    email = forms.EmailField()


class CommunityContactFieldsForm(ApiForm):
    """Campos que un community_admin puede editar en su propia comunidad."""

    contactPerson = forms.CharField(max_length=160)
    phone = forms.CharField(max_length=40)
    email = forms.EmailField()


class ContactForm(ApiForm):
    name = forms.CharField(max_length=160)
    phone = forms.CharField(max_length=40)
    email = forms.EmailField()
