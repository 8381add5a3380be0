from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone

from festcore.apps.communities.models import Community
from festcore.apps.sports.models import Sport


DEFAULT_AGE_CALCULATOR_DATE = date(2026, 11, 1)


class Participant(models.Model):
    """
    Persona inscrita por una comunidad en uno o más deportes.
    pending_sports: cambio de deportes propuesto y aún no aprobado,
    siempre en forma normalizada [{"sportId": int, "notes": str|None}].
    """

    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_REJECTED = "rejected"
    STATUS_CHOICES = (
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
    )
    GENDER_CHOICES = (
        ("male", "Male"),
        ("female", "Female"),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="participant")
    community = models.ForeignKey(Community, on_delete=models.PROTECT, related_name="participants")

    first_name = models.CharField(max_length=120)
    middle_name = models.CharField(max_length=120, blank=True)
    last_name = models.CharField(max_length=120)
    gender = models.CharField(max_length=8, choices=GENDER_CHOICES)
    dob = models.DateField()
    email = models.EmailField()
    phone = models.CharField(max_length=40)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    next_of_kin = models.JSONField(default=dict, blank=True)
    team_name = models.CharField(max_length=160, blank=True)
    notes = models.TextField(blank=True)  # detalles de pago
    pending_sports = models.JSONField(null=True, blank=True)

    sports = models.ManyToManyField(Sport, through="ParticipantSport", related_name="participants")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.full_name} · {self.community}"

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p)

    def live_sport_ids(self) -> set[int]:
        return set(self.sport_links.values_list("sport_id", flat=True))


class ParticipantSport(models.Model):
    participant = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name="sport_links")
    sport = models.ForeignKey(Sport, on_delete=models.CASCADE, related_name="participant_links")
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (("participant", "sport"),)
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.participant} · {self.sport}"


class FestivalSettings(models.Model):
    """Fila única con la configuración editable en tiempo de ejecución."""

    age_calculator_date = models.DateField(default=DEFAULT_AGE_CALCULATOR_DATE)
    profile_freeze_date = models.DateField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "festival settings"
        verbose_name_plural = "festival settings"

    def __str__(self) -> str:
        return f"Settings (edad al {self.age_calculator_date})"

    @classmethod
    def load(cls) -> "FestivalSettings":
        obj = cls.objects.order_by("pk").first()
        if obj is None:
            obj = cls.objects.create()
        return obj


def is_frozen(freeze_date: Optional[date], now: Optional[datetime] = None) -> bool:
    """True cuando 'now' ya pasó el final del día de freeze_date (hora local)."""
    if freeze_date is None:
        return False
    now = now or timezone.now()
    return timezone.localtime(now).date() > freeze_date
