from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Sport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=160)),
                ("type", models.CharField(choices=[("individual", "Individual"), ("team", "Team")], default="individual", max_length=16)),
                ("requires_team_name", models.BooleanField(default=False)),
                ("active", models.BooleanField(default=True)),
                ("venue", models.CharField(blank=True, max_length=160)),
                ("timings", models.CharField(blank=True, max_length=160)),
                ("date", models.DateField(blank=True, null=True)),
                ("gender", models.CharField(blank=True, choices=[("male", "Male"), ("female", "Female"), ("mixed", "Mixed")], max_length=8, null=True)),
                ("age_limit_min", models.PositiveIntegerField(blank=True, null=True)),
                ("age_limit_max", models.PositiveIntegerField(blank=True, null=True)),
                ("rules", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("parent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="children", to="sports.sport")),
            ],
            options={
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="TournamentFormat",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("category", models.CharField(max_length=120, unique=True)),
                ("title", models.CharField(max_length=200)),
                ("content", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ("category",),
            },
        ),
        migrations.CreateModel(
            name="Convenor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=160)),
                ("phone", models.CharField(max_length=40)),
                ("email", models.EmailField(max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("sport", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="convenor", to="sports.sport")),
            ],
            options={
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="CalendarItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("time", models.CharField(max_length=40)),
                ("venue", models.CharField(max_length=160)),
                ("type", models.CharField(max_length=60)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("sport", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="calendar_items", to="sports.sport")),
            ],
            options={
                "ordering": ("date", "time"),
            },
        ),
        migrations.CreateModel(
            name="SportIncompatibility",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("incompatible_sport", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="sports.sport")),
                ("sport", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="incompatibilities", to="sports.sport")),
            ],
            options={
                "verbose_name_plural": "sport incompatibilities",
                "unique_together": {("sport", "incompatible_sport")},
            },
        ),
    ]
