from __future__ import annotations

from django.db import models

from festcore.apps.communities.models import Community
from festcore.apps.sports.models import Sport


class LeaderboardEntry(models.Model):
    """Puntaje de una comunidad en un deporte. El ranking general se calcula al leer."""

    MEDAL_CHOICES = (
        ("gold", "Gold"),
        ("silver", "Silver"),
        ("bronze", "Bronze"),
        ("none", "None"),
    )

    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name="leaderboard_entries")
    sport = models.ForeignKey(Sport, on_delete=models.CASCADE, related_name="leaderboard_entries")
    score = models.PositiveIntegerField(default=0)
    position = models.PositiveIntegerField(null=True, blank=True)
    medal_type = models.CharField(max_length=8, choices=MEDAL_CHOICES, default="none")
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = (("community", "sport"),)
        ordering = ("-score", "community__name")
        verbose_name_plural = "leaderboard entries"

    def __str__(self) -> str:
        return f"{self.community} · {self.sport}: {self.score}"
