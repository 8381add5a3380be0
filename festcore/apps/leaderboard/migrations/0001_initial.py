from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("communities", "0001_initial"),
        ("sports", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="LeaderboardEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("score", models.PositiveIntegerField(default=0)),
                ("position", models.PositiveIntegerField(blank=True, null=True)),
                ("medal_type", models.CharField(choices=[("gold", "Gold"), ("silver", "Silver"), ("bronze", "Bronze"), ("none", "None")], default="none", max_length=8)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("community", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="leaderboard_entries", to="communities.community")),
                ("sport", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="leaderboard_entries", to="sports.sport")),
            ],
            options={
                "ordering": ("-score", "community__name"),
                "verbose_name_plural": "leaderboard entries",
                "unique_together": {("community", "sport")},
            },
        ),
    ]
