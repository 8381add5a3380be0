from __future__ import annotations

from django import forms

from festcore.apps.core.forms import ApiForm, IdField

from .models import LeaderboardEntry


class EntryForm(ApiForm):
    communityId = IdField()
    sportId = IdField()
    score = forms.IntegerField(min_value=0)
    position = forms.IntegerField(required=False, min_value=1)
    medalType = forms.ChoiceField(choices=LeaderboardEntry.MEDAL_CHOICES, required=False)
    notes = forms.CharField(required=False)
