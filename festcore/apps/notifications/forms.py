from __future__ import annotations

from django import forms

from festcore.apps.core.forms import ApiForm


class ContactForm(ApiForm):
    name = forms.CharField(max_length=160)
    email = forms.EmailField()
    message = forms.CharField()


class SendEmailForm(ApiForm):
    to = forms.EmailField()
    subject = forms.CharField(max_length=255)
    body = forms.CharField()
    # "from" es palabra reservada; se lee aparte del payload
    sender = forms.EmailField(required=False)


class ConfirmationForm(ApiForm):
    to = forms.EmailField()
