from __future__ import annotations

from datetime import date

from django.test import TestCase

from festcore.apps.accounts.models import Profile
from festcore.apps.core.testing import (
    PASSWORD,
    auth_header,
    make_sport,
    make_user,
    patch_json,
    post_json,
)
from festcore.apps.registration.models import FestivalSettings
from festcore.apps.volunteers.models import Department, Volunteer


class VolunteerTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.volunteer_admin = make_user("vadmin", Profile.ROLE_VOLUNTEER_ADMIN)
        cls.football = make_sport("Football", type="team")
        cls.swimming = make_sport("Swimming")
        cls.closed = make_sport("Chess", active=False)
        cls.logistics = Department.objects.create(name="Logistics")

    def payload(self, **overrides):
        data = {
            "firstName": "Wanjiku",
            "lastName": "Kamau",
            "gender": "female",
            "dob": "1996-07-12",
            "email": "wanjiku@example.com",
            "phone": "+254700000020",
            "username": "wanjiku_k",
            "password": "secret1",
            "sportId": self.football.pk,
            "departmentId": self.logistics.pk,
        }
        data.update(overrides)
        return data

    def register(self, **overrides):
        return post_json(self.client, "/api/volunteers", self.payload(**overrides))

    def test_public_registration_creates_volunteer_login(self):
        r = self.register()
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertEqual(body["sport"]["name"], "Football")
        self.assertEqual(body["department"]["name"], "Logistics")

        r = post_json(self.client, "/api/auth/volunteer/login", {"username": "wanjiku_k", "password": "secret1"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["role"], "volunteer")

    def test_duplicates(self):
        self.register()
        r = self.register(email="other@example.com")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "Username already exists")

        r = self.register(username="someone_else", email="WANJIKU@example.com")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "Volunteer with this email already exists")

        make_user("staff", email="staff@fof.co.ke")
        r = self.register(username="third", email="staff@fof.co.ke")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "An account with this email already exists")

    def test_validation(self):
        r = self.register(username="a b", password="123", sportId=self.closed.pk)
        self.assertEqual(r.status_code, 400)
        details = r.json()["details"]
        self.assertIn("username", details)
        self.assertEqual(details["password"], ["Password must be at least 6 characters"])

        r = self.register(sportId=self.closed.pk)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Sport is not active")
        self.assertFalse(Volunteer.objects.exists())

    def test_listing_is_for_managers(self):
        self.register()
        self.register(username="juma_o", email="juma@example.com", sportId=self.swimming.pk)

        r = self.client.get("/api/volunteers", **auth_header(self.volunteer_admin))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.json()), 2)

        r = self.client.get("/api/volunteers", {"sportId": self.swimming.pk}, **auth_header(self.admin))
        self.assertEqual([v["username"] for v in r.json()], ["juma_o"])

        volunteer_user = make_user("plain", Profile.ROLE_VOLUNTEER)
        r = self.client.get("/api/volunteers", **auth_header(volunteer_user))
        self.assertEqual(r.status_code, 403)

    def test_admin_edit_and_delete(self):
        volunteer_id = self.register().json()["id"]
        r = patch_json(self.client, f"/api/volunteers/{volunteer_id}",
                       {"phone": "+254711111111", "departmentId": None}, self.volunteer_admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["phone"], "+254711111111")
        self.assertIsNone(r.json()["department"])

        r = self.client.delete(f"/api/volunteers/{volunteer_id}", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(Volunteer.objects.filter(pk=volunteer_id).exists())

    def test_export(self):
        self.register()
        r = self.client.get("/api/volunteers/export/csv", **auth_header(self.admin))
        lines = r.content.decode().strip().split("\n")
        self.assertEqual(lines[0], "id,firstName,middleName,lastName,gender,dob,email,phone,sport,createdAt,updatedAt")
        self.assertIn("Football", lines[1])


class VolunteerSelfServiceTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.swimming = make_sport("Swimming")
        cls.user = make_user("vol1", Profile.ROLE_VOLUNTEER, email="vol1@example.com")
        cls.volunteer = Volunteer.objects.create(
            user=cls.user, first_name="Juma", last_name="Otieno", gender="male",
            dob=date(1994, 2, 2), email="vol1@example.com", phone="+254700000030",
        )

    def test_me(self):
        r = self.client.get("/api/volunteers/me", **auth_header(self.user))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["firstName"], "Juma")

        r = patch_json(self.client, "/api/volunteers/me", {"middleName": "Ouma"}, self.user)
        self.assertEqual(r.json()["middleName"], "Ouma")

    def test_change_sport(self):
        r = patch_json(self.client, "/api/volunteers/me/sport", {"sportId": self.swimming.pk}, self.user)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["sportId"], self.swimming.pk)

        r = patch_json(self.client, "/api/volunteers/me/sport", {"sportId": None}, self.user)
        self.assertIsNone(r.json()["sport"])

    def test_freeze(self):
        festival = FestivalSettings.load()
        festival.profile_freeze_date = date(2020, 1, 1)
        festival.save()

        r = patch_json(self.client, "/api/volunteers/me/sport", {"sportId": self.swimming.pk}, self.user)
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["error"], "Sports selection updates are frozen")

        r = patch_json(self.client, "/api/volunteers/me", {"phone": "1"}, self.user)
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["error"], "Profile updates are frozen")

    def test_login_with_email(self):
        r = post_json(self.client, "/api/auth/volunteer/login", {"username": "vol1@example.com", "password": PASSWORD})
        self.assertEqual(r.status_code, 200)


class DepartmentTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.volunteer = make_user("vol1", Profile.ROLE_VOLUNTEER)

    def test_create_and_list(self):
        r = post_json(self.client, "/api/departments", {"name": "Medical"}, self.admin)
        self.assertEqual(r.status_code, 201)

        r = post_json(self.client, "/api/departments", {"name": "medical"}, self.admin)
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "Department already exists")

        r = post_json(self.client, "/api/departments", {"name": "Security"}, self.volunteer)
        self.assertEqual(r.status_code, 403)

        r = self.client.get("/api/departments", **auth_header(self.volunteer))
        self.assertEqual([d["name"] for d in r.json()], ["Medical"])

        self.assertEqual(self.client.get("/api/departments").status_code, 401)
