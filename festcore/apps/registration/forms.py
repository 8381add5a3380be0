from __future__ import annotations

from django import forms

from festcore.apps.core.forms import ApiForm, IdField, ObjectField

from .models import Participant
from .services.selection import SportSelectionField


class NextOfKinForm(ApiForm):
    firstName = forms.CharField(max_length=120)
    middleName = forms.CharField(required=False, max_length=120)
    lastName = forms.CharField(max_length=120)
    phone = forms.CharField(max_length=40)


class NextOfKinField(ObjectField):
    """Objeto {firstName, middleName?, lastName, phone} validado con NextOfKinForm."""

    def clean(self, value):
        value = super().clean(value)
        if value is None:
            return None
        form = NextOfKinForm(value)
        if not form.is_valid():
            messages = [str(m) for errs in form.errors.values() for m in errs]
            raise forms.ValidationError(messages)
        data = {k: v for k, v in form.cleaned_data.items() if v}
        return data


class ParticipantProfileForm(ApiForm):
    """Campos editables del perfil (PATCH /participants/me)."""

    firstName = forms.CharField(max_length=120)
    middleName = forms.CharField(required=False, max_length=120)
    lastName = forms.CharField(max_length=120)
    phone = forms.CharField(max_length=40)
    nextOfKin = NextOfKinField()
    teamName = forms.CharField(required=False, max_length=160)


class ParticipantForm(ParticipantProfileForm):
    gender = forms.ChoiceField(choices=Participant.GENDER_CHOICES)
    dob = forms.DateField()
    email = forms.EmailField()
    notes = forms.CharField(required=False)
    sports = SportSelectionField()


class RegistrationForm(ParticipantForm):
    password = forms.CharField(strip=False, min_length=6)
    communityId = IdField()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["password"].error_messages["min_length"] = "Password must be at least 6 characters"
        self.fields["sports"].error_messages["required"] = "At least one sport must be selected"


class StatusForm(ApiForm):
    status = forms.CharField()


class MySportsForm(ApiForm):
    """Acepta 'sportIds' (lista de ids) o 'sports' (ids u objetos {sportId, notes})."""

    sportIds = SportSelectionField(required=False)
    sports = SportSelectionField(required=False)

    def clean(self):
        cleaned = super().clean()
        if "sportIds" not in self.data and "sports" not in self.data:
            raise forms.ValidationError("sportIds is required")
        cleaned["selection"] = cleaned.get("sports") if "sports" in self.data else cleaned.get("sportIds")
        return cleaned


class FestivalSettingsForm(ApiForm):
    ageCalculatorDate = forms.DateField()
    profileFreezeDate = forms.DateField(required=False)


class BulkUploadForm(ApiForm):
    communityId = IdField(required=False)
