from __future__ import annotations

from django import forms
from django.core.exceptions import ValidationError

from .errors import ValidationFailed


def full_clean_or_400(instance, exclude=None) -> None:
    """full_clean() del modelo traducido a ValidationFailed (400)."""
    try:
        instance.full_clean(exclude=exclude)
    except ValidationError as exc:
        details = exc.message_dict if hasattr(exc, "error_dict") else {"__all__": exc.messages}
        first = next(iter(exc.messages), "Invalid input")
        raise ValidationFailed(first, details=details)


class ApiForm(forms.Form):
    """
    Form base para payloads JSON:
      • mensajes "<campo> is required"
      • partial=True: ningún campo obligatorio (PATCH)
      • provided(): sólo los campos presentes en el payload
    """

    def __init__(self, data=None, *args, partial: bool = False, **kwargs):
        super().__init__(data if data is not None else {}, *args, **kwargs)
        self.partial = partial
        for name, field in self.fields.items():
            field.error_messages["required"] = f"{name} is required"
            if partial:
                field.required = False

    def validated(self) -> dict:
        if not self.is_valid():
            raise ValidationFailed.from_form(self)
        return self.cleaned_data

    def provided(self) -> dict:
        data = self.validated()
        return {k: v for k, v in data.items() if k in self.data}


class ObjectField(forms.Field):
    """Objeto JSON (dict) anidado en el payload."""

    default_error_messages = {"invalid": "Must be an object"}

    def to_python(self, value):
        if value in (None, "", {}):
            return None
        if not isinstance(value, dict):
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")
        return value


class IdField(forms.IntegerField):
    """Id numérico; acepta '' / None como ausente."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("min_value", 1)
        super().__init__(*args, **kwargs)
