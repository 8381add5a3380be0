from __future__ import annotations

from django.db import models


class Community(models.Model):
    """Organización cuyos miembros se inscriben como participantes."""

    name = models.CharField(max_length=160, unique=True)
    active = models.BooleanField(default=True)
    contact_person = models.CharField(max_length=160)
    phone = models.CharField(max_length=40)
    email = models.EmailField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)
        verbose_name_plural = "communities"

    def __str__(self) -> str:
        return self.name


class CommunityContact(models.Model):
    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name="contacts")
    name = models.CharField(max_length=160)
    phone = models.CharField(max_length=40)
    email = models.EmailField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return f"{self.name} · {self.community}"
