from __future__ import annotations

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction

from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.services import create_account
from festcore.apps.communities.models import Community
from festcore.apps.leaderboard.models import LeaderboardEntry
from festcore.apps.registration.models import FestivalSettings
from festcore.apps.sports.models import Sport
from festcore.apps.sports.services.taxonomy import mark_incompatible
from festcore.apps.volunteers.models import Department

COMMUNITIES = ["Nairobi Central", "Mombasa Coast", "Kisumu Lakeside"]

# padre -> hijos (lista vacía = deporte sin subcategorías)
SPORTS = {
    "Football": [],
    "Basketball": [],
    "Swimming": [],
    "Athletics": ["100m Sprint", "Long Jump", "Relay"],
    "Racquet Sports": ["Badminton", "Table Tennis"],
}

DEPARTMENTS = ["Logistics", "Medical", "Hospitality", "Media"]


class Command(BaseCommand):
    help = "Crea datos demo del festival: admin, comunidades, deportes, departamentos y leaderboard."

    def add_arguments(self, parser):
        parser.add_argument("--admin-password", default="admin123", help="Password del usuario 'admin'")
        parser.add_argument("--with-scores", action="store_true", help="Carga puntajes de ejemplo")

    @transaction.atomic
    def handle(self, *args, **opts):
        FestivalSettings.load()

        if not User.objects.filter(username="admin").exists():
            create_account(username="admin", password=opts["admin_password"], role=Profile.ROLE_ADMIN,
                           email="admin@fof.co.ke")
            self.stdout.write(self.style.SUCCESS("Usuario admin creado"))

        communities = []
        for name in COMMUNITIES:
            community, _ = Community.objects.get_or_create(name=name, defaults={"active": True})
            communities.append(community)

        sports = []
        for parent_name, children in SPORTS.items():
            sport_type = "team" if parent_name in ("Football", "Basketball") else "individual"
            parent, _ = Sport.objects.get_or_create(
                name=parent_name, parent=None,
                defaults={"type": sport_type, "requires_team_name": sport_type == "team"},
            )
            if not children:
                sports.append(parent)
            for child_name in children:
                child, _ = Sport.objects.get_or_create(name=child_name, parent=parent, defaults={"type": "individual"})
                sports.append(child)

        # Mismo horario: no se pueden combinar
        mark_incompatible(Sport.objects.get(name="Football", parent=None),
                          Sport.objects.get(name="Basketball", parent=None))

        for name in DEPARTMENTS:
            Department.objects.get_or_create(name=name)

        if opts.get("with_scores"):
            for i, community in enumerate(communities):
                for j, sport in enumerate(sports):
                    LeaderboardEntry.objects.update_or_create(
                        community=community, sport=sport,
                        defaults={"score": (len(communities) - i) * 3 + j % 3},
                    )

        self.stdout.write(self.style.SUCCESS(
            f"Listo: {len(communities)} comunidades · {len(sports)} deportes seleccionables · "
            f"{len(DEPARTMENTS)} departamentos"
        ))
