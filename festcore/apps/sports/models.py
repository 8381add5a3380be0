from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models


class Sport(models.Model):
    """
    Taxonomía de dos niveles: categoría padre -> sub-deporte.
    Un hijo no puede tener hijos (profundidad máxima 2).
    """

    TYPE_CHOICES = (
        ("individual", "Individual"),
        ("team", "Team"),
    )
    GENDER_CHOICES = (
        ("male", "Male"),
        ("female", "Female"),
        ("mixed", "Mixed"),
    )

    name = models.CharField(max_length=160)
    type = models.CharField(max_length=16, choices=TYPE_CHOICES, default="individual")
    requires_team_name = models.BooleanField(default=False)
    parent = models.ForeignKey(
        "self", null=True, blank=True, on_delete=models.CASCADE, related_name="children"
    )
    active = models.BooleanField(default=True)

    venue = models.CharField(max_length=160, blank=True)
    timings = models.CharField(max_length=160, blank=True)
    date = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=8, choices=GENDER_CHOICES, null=True, blank=True)
    age_limit_min = models.PositiveIntegerField(null=True, blank=True)
    age_limit_max = models.PositiveIntegerField(null=True, blank=True)
    rules = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        """'Padre - Hijo' para sub-deportes; nombre simple para categorías."""
        if self.parent_id:
            return f"{self.parent.name} - {self.name}"
        return self.name

    def clean(self):
        if self.parent_id:
            if self.pk and self.parent_id == self.pk:
                raise ValidationError({"parent": "A sport cannot be its own parent"})
            if self.parent.parent_id:
                raise ValidationError({"parent": "Sub-sports cannot have sub-sports of their own"})
            if self.pk and Sport.objects.filter(parent_id=self.pk).exists():
                raise ValidationError({"parent": "A sport with sub-sports cannot be moved under another sport"})
        if (
            self.age_limit_min is not None
            and self.age_limit_max is not None
            and self.age_limit_min > self.age_limit_max
        ):
            raise ValidationError({"age_limit_max": "ageLimitMax must be greater than or equal to ageLimitMin"})

    def family_ids(self) -> list[int]:
        """Este deporte y sus hijos directos."""
        return [self.pk, *Sport.objects.filter(parent_id=self.pk).values_list("pk", flat=True)]


class SportIncompatibility(models.Model):
    """Arista dirigida; se guarda siempre en ambos sentidos."""

    sport = models.ForeignKey(Sport, on_delete=models.CASCADE, related_name="incompatibilities")
    incompatible_sport = models.ForeignKey(Sport, on_delete=models.CASCADE, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (("sport", "incompatible_sport"),)
        verbose_name_plural = "sport incompatibilities"

    def __str__(self) -> str:
        return f"{self.sport} ✕ {self.incompatible_sport}"


class Convenor(models.Model):
    name = models.CharField(max_length=160)
    phone = models.CharField(max_length=40)
    email = models.EmailField()
    sport = models.OneToOneField(
        Sport, null=True, blank=True, on_delete=models.SET_NULL, related_name="convenor"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class TournamentFormat(models.Model):
    category = models.CharField(max_length=120, unique=True)
    title = models.CharField(max_length=200)
    content = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("category",)

    def __str__(self) -> str:
        return f"{self.category}: {self.title}"


class CalendarItem(models.Model):
    sport = models.ForeignKey(Sport, on_delete=models.CASCADE, related_name="calendar_items")
    date = models.DateField()
    time = models.CharField(max_length=40)
    venue = models.CharField(max_length=160)
    type = models.CharField(max_length=60)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("date", "time")

    def __str__(self) -> str:
        return f"{self.sport} · {self.date} {self.time}"
