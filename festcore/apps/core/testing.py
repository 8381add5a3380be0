"""
Constructores de datos para los tests de la API.
Crean usuarios con rol/alcance y devuelven cabeceras Bearer listas para self.client.
"""
from __future__ import annotations

import json
from datetime import date
from typing import Optional, Sequence

from django.contrib.auth.models import User

from festcore.apps.accounts.models import Profile
from festcore.apps.accounts.tokens import issue_token
from festcore.apps.communities.models import Community
from festcore.apps.registration.models import Participant, ParticipantSport
from festcore.apps.sports.models import Sport

PASSWORD = "Pass1234!"


def make_user(username: str, role: str = Profile.ROLE_USER, *, community=None, sport=None,
              email: str = "", password: str = PASSWORD) -> User:
    user = User.objects.create_user(username=username, email=email, password=password)
    Profile.objects.update_or_create(user=user, defaults={"role": role, "community": community, "sport": sport})
    return user


def auth_header(user: User) -> dict:
    """kwargs para self.client.<método>(..., **auth_header(user))."""
    token = issue_token(user, user.profile.role)
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


def make_community(name: str, **kwargs) -> Community:
    kwargs.setdefault("active", True)
    return Community.objects.create(name=name, **kwargs)


def make_sport(name: str, parent: Optional[Sport] = None, **kwargs) -> Sport:
    kwargs.setdefault("type", "individual")
    kwargs.setdefault("active", True)
    return Sport.objects.create(name=name, parent=parent, **kwargs)


def make_participant(community: Community, sports: Sequence[Sport] = (), *, email: str,
                     status: str = Participant.STATUS_PENDING, username: Optional[str] = None) -> Participant:
    user = make_user(username or email.split("@")[0], email=email, community=community)
    participant = Participant.objects.create(
        user=user,
        community=community,
        first_name="Test",
        last_name=email.split("@")[0].title(),
        gender="male",
        dob=date(1995, 6, 1),
        email=email,
        phone="+254700000001",
        next_of_kin={"firstName": "Kin", "lastName": "Person", "phone": "+254700000002"},
        status=status,
    )
    ParticipantSport.objects.bulk_create([ParticipantSport(participant=participant, sport=s) for s in sports])
    return participant


def post_json(client, path: str, data: dict, user: Optional[User] = None):
    return client.post(path, data=json.dumps(data), content_type="application/json",
                       **(auth_header(user) if user else {}))


def patch_json(client, path: str, data: dict, user: Optional[User] = None):
    return client.patch(path, data=json.dumps(data), content_type="application/json",
                        **(auth_header(user) if user else {}))


def put_json(client, path: str, data: dict, user: Optional[User] = None):
    return client.put(path, data=json.dumps(data), content_type="application/json",
                      **(auth_header(user) if user else {}))
