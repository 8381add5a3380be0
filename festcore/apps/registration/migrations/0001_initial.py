import datetime

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("communities", "0001_initial"),
        ("sports", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="FestivalSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("age_calculator_date", models.DateField(default=datetime.date(2026, 11, 1))),
                ("profile_freeze_date", models.DateField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "festival settings",
                "verbose_name_plural": "festival settings",
            },
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=120)),
                ("middle_name", models.CharField(blank=True, max_length=120)),
                ("last_name", models.CharField(max_length=120)),
                ("gender", models.CharField(choices=[("male", "Male"), ("female", "Female")], max_length=8)),
                ("dob", models.DateField()),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(max_length=40)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("accepted", "Accepted"), ("rejected", "Rejected")], default="pending", max_length=16)),
                ("next_of_kin", models.JSONField(blank=True, default=dict)),
                ("team_name", models.CharField(blank=True, max_length=160)),
                ("notes", models.TextField(blank=True)),
                ("pending_sports", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("community", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="participants", to="communities.community")),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="participant", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="ParticipantSport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("participant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sport_links", to="registration.participant")),
                ("sport", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="participant_links", to="sports.sport")),
            ],
            options={
                "ordering": ("id",),
                "unique_together": {("participant", "sport")},
            },
        ),
        migrations.AddField(
            model_name="participant",
            name="sports",
            field=models.ManyToManyField(related_name="participants", through="registration.ParticipantSport", to="sports.sport"),
        ),
    ]
