from __future__ import annotations

from django.contrib.auth.models import User
from django.db import models

from festcore.apps.sports.models import Sport


class Department(models.Model):
    name = models.CharField(max_length=120, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class Volunteer(models.Model):
    GENDER_CHOICES = (
        ("male", "Male"),
        ("female", "Female"),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="volunteer")
    first_name = models.CharField(max_length=120)
    middle_name = models.CharField(max_length=120, blank=True)
    last_name = models.CharField(max_length=120)
    gender = models.CharField(max_length=8, choices=GENDER_CHOICES)
    dob = models.DateField()
    email = models.EmailField()
    phone = models.CharField(max_length=40)

    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.SET_NULL, related_name="volunteers"
    )
    sport = models.ForeignKey(
        Sport, null=True, blank=True, on_delete=models.SET_NULL, related_name="volunteers"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"
