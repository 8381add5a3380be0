from __future__ import annotations

from django import forms

from festcore.apps.accounts.forms import ScopedAdminForm
from festcore.apps.core.forms import ApiForm, IdField

from .models import Sport


class SportForm(ScopedAdminForm):
    name = forms.CharField(max_length=160)
    active = forms.BooleanField(required=False)
    type = forms.ChoiceField(choices=Sport.TYPE_CHOICES)
    requiresTeamName = forms.BooleanField(required=False)
    parentId = IdField(required=False)
    venue = forms.CharField(required=False, max_length=160)
    timings = forms.CharField(required=False, max_length=160)
    date = forms.DateField(required=False)
    gender = forms.ChoiceField(choices=Sport.GENDER_CHOICES, required=False)
    ageLimitMin = forms.IntegerField(required=False, min_value=0)
    ageLimitMax = forms.IntegerField(required=False, min_value=0)
    rules = forms.CharField(required=False)


# payload -> atributo del modelo
SPORT_FIELDS = {
    "name": "name",
    "active": "active",
    "type": "type",
    "requiresTeamName": "requires_team_name",
    "parentId": "parent_id",
    "venue": "venue",
    "timings": "timings",
    "date": "date",
    "gender": "gender",
    "ageLimitMin": "age_limit_min",
    "ageLimitMax": "age_limit_max",
    "rules": "rules",
}


class IdListField(forms.Field):
    default_error_messages = {"invalid": "Must be a list of ids"}

    def to_python(self, value):
        if value in (None, ""):
            return []
        if not isinstance(value, (list, tuple)):
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")
        try:
            return [int(v) for v in value]
        except (TypeError, ValueError):
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")


class IncompatibilitiesForm(ApiForm):
    sportIds = IdListField(required=False)


class ConvenorForm(ApiForm):
    name = forms.CharField(max_length=160)
    phone = forms.CharField(max_length=40)
    email = forms.EmailField()
    sportId = IdField(required=False)


class TournamentFormatForm(ApiForm):
    category = forms.CharField(max_length=120)
    title = forms.CharField(max_length=200)
    content = forms.CharField()


class CalendarItemForm(ApiForm):
    sportId = IdField()
    date = forms.DateField()
    time = forms.CharField(max_length=40)
    venue = forms.CharField(max_length=160)
    type = forms.CharField(max_length=60)
