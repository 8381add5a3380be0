from __future__ import annotations

from django import forms

from festcore.apps.accounts.forms import validate_username_format
from festcore.apps.core.forms import ApiForm, IdField

from .models import Volunteer


class VolunteerProfileForm(ApiForm):
    firstName = forms.CharField(max_length=120)
    middleName = forms.CharField(required=False, max_length=120)
    lastName = forms.CharField(max_length=120)
    phone = forms.CharField(max_length=40)


class VolunteerForm(VolunteerProfileForm):
    gender = forms.ChoiceField(choices=Volunteer.GENDER_CHOICES)
    dob = forms.DateField()
    email = forms.EmailField()
    username = forms.CharField(max_length=30, validators=[validate_username_format])
    password = forms.CharField(strip=False, min_length=6)
    sportId = IdField(required=False)
    departmentId = IdField(required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["password"].error_messages["min_length"] = "Password must be at least 6 characters"


class VolunteerSportForm(ApiForm):
    sportId = IdField(required=False)


class DepartmentForm(ApiForm):
    name = forms.CharField(max_length=120)
