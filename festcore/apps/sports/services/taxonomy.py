# festcore/apps/sports/services/taxonomy.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from django.db import transaction

from festcore.apps.core.errors import NotFound, ValidationFailed

from ..models import Sport, SportIncompatibility


# ------------------------------
# Resolución de nombres (bulk upload)
# ------------------------------
@dataclass
class Resolution:
    sport_ids: List[int] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    ambiguous: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.ambiguous

    @property
    def error(self) -> Optional[str]:
        """Todas las fallas de la fila en un único mensaje."""
        parts = []
        if self.missing:
            parts.append(f"Sports not found: {', '.join(self.missing)}")
        if self.ambiguous:
            parts.append(
                f"Ambiguous sport names: {', '.join(self.ambiguous)}. "
                'Use the "Parent - Child" format to pick one'
            )
        return "; ".join(parts) or None


def split_labels(raw: str) -> List[str]:
    return [label.strip() for label in (raw or "").split(",") if label.strip()]


def resolve_sport_labels(raw: str, active_sports: Optional[Sequence[Sport]] = None) -> Resolution:
    """
    Etiquetas separadas por coma -> ids de deportes activos.
      • 'Padre - Hijo': padre de primer nivel y luego su hijo (sin distinguir mayúsculas)
      • 'Nombre': cualquier deporte activo con ese nombre; más de uno es ambiguo
    Etiquetas repetidas que resuelven al mismo deporte se colapsan.
    """
    if active_sports is None:
        active_sports = list(Sport.objects.filter(active=True))
    result = Resolution()

    for label in split_labels(raw):
        if " - " in label:
            parent_name, child_name = (p.strip().casefold() for p in label.split(" - ", 1))
            parent = next(
                (s for s in active_sports if s.parent_id is None and s.name.casefold() == parent_name),
                None,
            )
            child = None
            if parent is not None:
                child = next(
                    (s for s in active_sports if s.parent_id == parent.pk and s.name.casefold() == child_name),
                    None,
                )
            if child is None:
                result.missing.append(label)
                continue
            match = child
        else:
            matches = [s for s in active_sports if s.name.casefold() == label.casefold()]
            if len(matches) > 1:
                result.ambiguous.append(label)
                continue
            if not matches:
                result.missing.append(label)
                continue
            match = matches[0]

        if match.pk not in result.sport_ids:
            result.sport_ids.append(match.pk)

    return result


# ------------------------------
# Incompatibilidades (relación simétrica)
# ------------------------------
def find_incompatible_pair(sport_ids: Iterable[int]) -> Optional[Tuple[Sport, Sport]]:
    """Primer par incompatible dentro de la selección (en orden de selección), o None."""
    ids = list(dict.fromkeys(int(i) for i in sport_ids))
    if len(ids) < 2:
        return None
    edges = set(
        SportIncompatibility.objects.filter(sport_id__in=ids, incompatible_sport_id__in=ids)
        .values_list("sport_id", "incompatible_sport_id")
    )
    if not edges:
        return None
    for i, a in enumerate(ids):
        for b in ids[i + 1:]:
            if (a, b) in edges or (b, a) in edges:
                pair = Sport.objects.select_related("parent").in_bulk([a, b])
                return pair[a], pair[b]
    return None


def incompatibility_message(a: Sport, b: Sport) -> str:
    return f"{a.display_name} and {b.display_name} are incompatible and cannot be selected together"


def incompatibility_error(sport_ids: Iterable[int]) -> Optional[str]:
    pair = find_incompatible_pair(sport_ids)
    return incompatibility_message(*pair) if pair else None


def ensure_compatible(sport_ids: Iterable[int]) -> None:
    message = incompatibility_error(sport_ids)
    if message:
        raise ValidationFailed(message)


def incompatible_ids_for(sport: Sport) -> List[int]:
    out = set(SportIncompatibility.objects.filter(sport=sport).values_list("incompatible_sport_id", flat=True))
    out |= set(SportIncompatibility.objects.filter(incompatible_sport=sport).values_list("sport_id", flat=True))
    return sorted(out)


@transaction.atomic
def set_incompatibilities(sport: Sport, other_ids: Iterable[int]) -> List[int]:
    """Reemplaza el conjunto de incompatibles de 'sport', guardando ambas direcciones."""
    ids = sorted({int(i) for i in other_ids} - {sport.pk})
    found = set(Sport.objects.filter(pk__in=ids).values_list("pk", flat=True))
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFound(f"Sport not found: {', '.join(str(i) for i in missing)}")

    SportIncompatibility.objects.filter(sport=sport).delete()
    SportIncompatibility.objects.filter(incompatible_sport=sport).delete()
    rows = []
    for other in ids:
        rows.append(SportIncompatibility(sport=sport, incompatible_sport_id=other))
        rows.append(SportIncompatibility(sport_id=other, incompatible_sport=sport))
    SportIncompatibility.objects.bulk_create(rows)
    return ids


def mark_incompatible(a: Sport, b: Sport) -> None:
    """Agrega un par (ambas direcciones) sin tocar el resto."""
    SportIncompatibility.objects.get_or_create(sport=a, incompatible_sport=b)
    SportIncompatibility.objects.get_or_create(sport=b, incompatible_sport=a)


# ------------------------------
# Selección de deportes (ids directos)
# ------------------------------
def load_active_sports(sport_ids: Iterable[int]) -> List[Sport]:
    """Verifica existencia y estado activo, conservando el orden recibido."""
    ids = list(dict.fromkeys(int(i) for i in sport_ids))
    sports = Sport.objects.select_related("parent").in_bulk(ids)
    missing = [str(i) for i in ids if i not in sports]
    if missing:
        raise ValidationFailed(f"Sport not found: {', '.join(missing)}")
    inactive = [sports[i].display_name for i in ids if not sports[i].active]
    if inactive:
        raise ValidationFailed(f"Sport is not active: {', '.join(inactive)}")
    return [sports[i] for i in ids]
