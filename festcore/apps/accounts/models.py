from django.db import models
from django.contrib.auth.models import User


class Profile(models.Model):
    ROLE_ADMIN = "admin"
    ROLE_COMMUNITY_ADMIN = "community_admin"
    ROLE_SPORTS_ADMIN = "sports_admin"
    ROLE_VOLUNTEER_ADMIN = "volunteer_admin"
    ROLE_VOLUNTEER = "volunteer"
    ROLE_USER = "user"

    ROLE_CHOICES = (
        (ROLE_ADMIN, "Admin"),
        (ROLE_COMMUNITY_ADMIN, "Community admin"),
        (ROLE_SPORTS_ADMIN, "Sports admin"),
        (ROLE_VOLUNTEER_ADMIN, "Volunteer admin"),
        (ROLE_VOLUNTEER, "Volunteer"),
        (ROLE_USER, "User"),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=32, choices=ROLE_CHOICES, default=ROLE_USER)

    # Alcance del rol: community_admin -> comunidad; sports_admin -> deporte
    community = models.ForeignKey(
        "communities.Community", null=True, blank=True, on_delete=models.SET_NULL, related_name="admins"
    )
    sport = models.ForeignKey(
        "sports.Sport", null=True, blank=True, on_delete=models.SET_NULL, related_name="admins"
    )

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.username} ({self.role})"
