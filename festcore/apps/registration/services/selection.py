# festcore/apps/registration/services/selection.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from django import forms


@dataclass(frozen=True)
class SportSelection:
    """Un deporte elegido, con notas opcionales. Forma interna única de toda selección."""

    sport_id: int
    notes: Optional[str] = None

    def as_json(self) -> dict:
        return {"sportId": self.sport_id, "notes": self.notes}


def _one(item: Any) -> SportSelection:
    # Acepta un id suelto (legado) o un objeto {sportId, notes}
    if isinstance(item, dict):
        raw_id = item.get("sportId")
        notes = item.get("notes")
        notes = str(notes).strip() if notes is not None else ""
        notes = notes or None
    else:
        raw_id, notes = item, None
    if isinstance(raw_id, bool):
        raise ValueError("Invalid sport ID")
    try:
        sport_id = int(raw_id)
    except (TypeError, ValueError):
        raise ValueError("Invalid sport ID")
    if sport_id < 1:
        raise ValueError("Invalid sport ID")
    return SportSelection(sport_id, notes)


def normalize_selection(items: Optional[Iterable[Any]]) -> List[SportSelection]:
    """
    Cualquier forma admitida -> lista de SportSelection sin repetidos
    (gana la primera aparición de cada deporte). None -> [].
    """
    out: List[SportSelection] = []
    seen = set()
    for item in items or []:
        sel = _one(item)
        if sel.sport_id in seen:
            continue
        seen.add(sel.sport_id)
        out.append(sel)
    return out


def selection_ids(selection: Iterable[SportSelection]) -> List[int]:
    return [s.sport_id for s in selection]


def selection_to_json(selection: Iterable[SportSelection]) -> list:
    return [s.as_json() for s in selection]


class SportSelectionField(forms.Field):
    """Campo de formulario para 'sports' / 'sportIds' en cualquiera de sus formas."""

    default_error_messages = {"invalid": "Must be a list of sport ids or {sportId, notes} objects"}

    def to_python(self, value):
        if value in (None, ""):
            return []
        if not isinstance(value, (list, tuple)):
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")
        try:
            return normalize_selection(value)
        except ValueError as exc:
            raise forms.ValidationError(str(exc), code="invalid")

