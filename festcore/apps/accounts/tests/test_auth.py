from __future__ import annotations

from datetime import timedelta

import jwt
from django.conf import settings
from django.contrib.auth.models import User
from django.test import TestCase
from django.utils import timezone

from festcore.apps.accounts.models import Profile
from festcore.apps.core.testing import (
    PASSWORD,
    auth_header,
    make_community,
    make_sport,
    make_user,
    patch_json,
    post_json,
)


class AuthFixtures(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN, email="root@fof.co.ke")
        cls.community = make_community("Nairobi Central")
        cls.other_community = make_community("Mombasa Coast")
        cls.closed_community = make_community("Closed", active=False)
        cls.sport = make_sport("Football", type="team")
        cls.community_admin = make_user("nairobi_admin", Profile.ROLE_COMMUNITY_ADMIN, community=cls.community)
        cls.closed_admin = make_user("closed_admin", Profile.ROLE_COMMUNITY_ADMIN, community=cls.closed_community)
        cls.sports_admin = make_user("football_admin", Profile.ROLE_SPORTS_ADMIN, sport=cls.sport)
        cls.volunteer = make_user("vol1", Profile.ROLE_VOLUNTEER)


class LoginTests(AuthFixtures):
    def test_login_with_username_or_email(self):
        r = post_json(self.client, "/api/auth/login", {"username": "root", "password": PASSWORD})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["user"]["role"], "admin")
        self.assertTrue(body["token"])

        r = post_json(self.client, "/api/auth/login", {"username": "ROOT@fof.co.ke", "password": PASSWORD})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["username"], "root")

    def test_login_rejects_bad_password(self):
        r = post_json(self.client, "/api/auth/login", {"username": "root", "password": "nope"})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "Invalid credentials")

    def test_login_requires_fields(self):
        r = post_json(self.client, "/api/auth/login", {})
        self.assertEqual(r.status_code, 400)
        details = r.json()["details"]
        self.assertEqual(details["username"], ["username is required"])
        self.assertEqual(details["password"], ["password is required"])

    def test_me_requires_token(self):
        r = self.client.get("/api/auth/me")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "No token provided")

        r = self.client.get("/api/auth/me", HTTP_AUTHORIZATION="Bearer garbage")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "Invalid token")

    def test_expired_token(self):
        past = timezone.now() - timedelta(days=10)
        token = jwt.encode(
            {"sub": str(self.admin.pk), "role": "admin", "iat": past, "exp": past + timedelta(days=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        r = self.client.get("/api/auth/me", HTTP_AUTHORIZATION=f"Bearer {token}")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "Token expired")

    def test_token_for_deleted_user(self):
        ghost = make_user("ghost")
        headers = auth_header(ghost)
        ghost.delete()
        r = self.client.get("/api/auth/me", **headers)
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "User not found")

    def test_me_returns_scope(self):
        r = self.client.get("/api/auth/me", **auth_header(self.community_admin))
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["role"], "community_admin")
        self.assertEqual(body["communityId"], self.community.pk)
        self.assertEqual(body["community"]["name"], "Nairobi Central")

    def test_logout(self):
        r = post_json(self.client, "/api/auth/logout", {}, self.admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["message"], "Logged out successfully")

    def test_method_not_allowed(self):
        r = self.client.get("/api/auth/login")
        self.assertEqual(r.status_code, 405)


class ScopedLoginTests(AuthFixtures):
    """Variantes de login por rol."""

    def test_community_admin_login(self):
        r = post_json(self.client, "/api/auth/community-admin/login",
                      {"username": "nairobi_admin", "password": PASSWORD})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["communityId"], self.community.pk)

    def test_community_admin_login_wrong_role(self):
        r = post_json(self.client, "/api/auth/community-admin/login",
                      {"username": "football_admin", "password": PASSWORD})
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["error"], "Insufficient permissions")

    def test_community_admin_login_inactive_community(self):
        r = post_json(self.client, "/api/auth/community-admin/login",
                      {"username": "closed_admin", "password": PASSWORD})
        self.assertEqual(r.status_code, 403)

    def test_community_admin_login_mismatched_community(self):
        r = post_json(self.client, "/api/auth/community-admin/login",
                      {"username": "nairobi_admin", "password": PASSWORD, "communityId": self.other_community.pk})
        self.assertEqual(r.status_code, 403)

    def test_sports_admin_login(self):
        r = post_json(self.client, "/api/auth/sports-admin/login",
                      {"username": "football_admin", "password": PASSWORD, "sportId": self.sport.pk})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["sportId"], self.sport.pk)

    def test_volunteer_login_only_for_volunteers(self):
        r = post_json(self.client, "/api/auth/volunteer/login", {"username": "vol1", "password": PASSWORD})
        self.assertEqual(r.status_code, 200)
        r = post_json(self.client, "/api/auth/volunteer/login", {"username": "root", "password": PASSWORD})
        self.assertEqual(r.status_code, 403)

    def test_volunteer_admin_login_bad_credentials(self):
        r = post_json(self.client, "/api/auth/volunteer-admin/login", {"username": "vol1", "password": "wrong"})
        self.assertEqual(r.status_code, 401)


class SignupTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.community = make_community("Kisumu Lakeside")

    def test_signup_community_admin(self):
        r = post_json(self.client, "/api/auth/signup", {
            "role": "community", "username": "kisumu_lead", "password": "secret1",
            "communityId": self.community.pk,
        })
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertEqual(body["user"]["role"], "community_admin")
        self.assertEqual(body["user"]["communityId"], self.community.pk)
        self.assertTrue(body["token"])

    def test_signup_duplicate_username(self):
        make_user("taken")
        r = post_json(self.client, "/api/auth/signup", {"role": "volunteer", "username": "taken", "password": "secret1"})
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "Username already exists")


class UserAdminTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.community = make_community("Nairobi Central")
        cls.community_admin = make_user("nairobi_admin", Profile.ROLE_COMMUNITY_ADMIN, community=cls.community)

    def test_only_admin_lists_users(self):
        r = self.client.get("/api/users", **auth_header(self.community_admin))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["error"], "Insufficient permissions")

        r = self.client.get("/api/users", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertEqual({u["username"] for u in r.json()}, {"root", "nairobi_admin"})

    def test_create_update_delete_user(self):
        r = post_json(self.client, "/api/users", {
            "username": "vadmin", "password": "secret1", "role": "volunteer_admin", "email": "v@fof.co.ke",
        }, self.admin)
        self.assertEqual(r.status_code, 201)
        user_id = r.json()["id"]

        r = patch_json(self.client, f"/api/users/{user_id}", {"role": "admin"}, self.admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["role"], "admin")
        self.assertEqual(r.json()["email"], "v@fof.co.ke")

        r = patch_json(self.client, f"/api/users/{user_id}", {"username": "root"}, self.admin)
        self.assertEqual(r.status_code, 409)

        r = self.client.delete(f"/api/users/{user_id}", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(User.objects.filter(pk=user_id).exists())

    def test_missing_user(self):
        r = self.client.get("/api/users/9999", **auth_header(self.admin))
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["error"], "User not found")

    def test_export_csv_and_excel(self):
        r = self.client.get("/api/users/export/csv", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r["Content-Type"], "text/csv")
        lines = r.content.decode().strip().split("\n")
        self.assertEqual(lines[0], "id,username,email,role,community,sport,createdAt,updatedAt")
        self.assertEqual(len(lines), 3)

        r = self.client.get("/api/users/export/excel", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.content.startswith(b"PK"))

        r = self.client.get("/api/users/export/pdf", **auth_header(self.admin))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Invalid format. Use 'csv' or 'excel'")
