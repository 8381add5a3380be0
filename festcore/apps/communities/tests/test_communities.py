from __future__ import annotations

from django.test import TestCase

from festcore.apps.accounts.models import Profile
from festcore.apps.communities.models import Community
from festcore.apps.core.testing import (
    auth_header,
    make_community,
    make_participant,
    make_user,
    patch_json,
    post_json,
)


class CommunityTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.nairobi = make_community("Nairobi Central", email="nairobi@fof.co.ke")
        cls.mombasa = make_community("Mombasa Coast")
        cls.nairobi_admin = make_user("nairobi_admin", Profile.ROLE_COMMUNITY_ADMIN, community=cls.nairobi)

    def test_list_is_public(self):
        r = self.client.get("/api/communities")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([c["name"] for c in r.json()], ["Mombasa Coast", "Nairobi Central"])

    def test_detail_requires_token(self):
        self.assertEqual(self.client.get(f"/api/communities/{self.nairobi.pk}").status_code, 401)
        r = self.client.get(f"/api/communities/{self.nairobi.pk}", **auth_header(self.nairobi_admin))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["adminUsername"], "nairobi_admin")

    def test_create_provisions_scoped_admin(self):
        r = post_json(self.client, "/api/communities", {
            "name": "Kisumu Lakeside",
            "contactPerson": "Achieng",
            "phone": "+254700000003",
            "email": "kisumu@fof.co.ke",
            "adminUsername": "kisumu_admin",
            "adminPassword": "secret1",
        }, self.admin)
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertTrue(body["active"])
        self.assertEqual(body["adminUsername"], "kisumu_admin")

        r = post_json(self.client, "/api/auth/community-admin/login",
                      {"username": "kisumu_admin", "password": "secret1"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["communityId"], body["id"])

    def test_create_duplicate_name(self):
        r = post_json(self.client, "/api/communities", {
            "name": "nairobi central", "contactPerson": "X", "phone": "1", "email": "other@fof.co.ke",
        }, self.admin)
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "Community with this name or email already exists")

    def test_create_requires_admin(self):
        r = post_json(self.client, "/api/communities", {"name": "X"}, self.nairobi_admin)
        self.assertEqual(r.status_code, 403)

    def test_community_admin_edits_own_contact_fields_only(self):
        r = patch_json(self.client, f"/api/communities/{self.nairobi.pk}",
                       {"phone": "+254711000000", "name": "Renamed"}, self.nairobi_admin)
        self.assertEqual(r.status_code, 200)
        self.nairobi.refresh_from_db()
        self.assertEqual(self.nairobi.phone, "+254711000000")
        self.assertEqual(self.nairobi.name, "Nairobi Central")

        r = patch_json(self.client, f"/api/communities/{self.mombasa.pk}", {"phone": "1"}, self.nairobi_admin)
        self.assertEqual(r.status_code, 403)

    def test_delete_blocked_by_participants(self):
        make_participant(self.mombasa, email="p1@example.com")
        r = self.client.delete(f"/api/communities/{self.mombasa.pk}", **auth_header(self.admin))
        self.assertEqual(r.status_code, 409)

        empty = make_community("Empty")
        r = self.client.delete(f"/api/communities/{empty.pk}", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(Community.objects.filter(pk=empty.pk).exists())


class CommunityContactTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.nairobi = make_community("Nairobi Central")
        cls.mombasa = make_community("Mombasa Coast")
        cls.nairobi_admin = make_user("nairobi_admin", Profile.ROLE_COMMUNITY_ADMIN, community=cls.nairobi)

    def test_owner_manages_contacts(self):
        url = f"/api/community-contacts/community/{self.nairobi.pk}"
        r = post_json(self.client, url, {"name": "Wanjiku", "phone": "+2547", "email": "w@fof.co.ke"},
                      self.nairobi_admin)
        self.assertEqual(r.status_code, 201)
        contact_id = r.json()["id"]

        r = self.client.get(url, **auth_header(self.nairobi_admin))
        self.assertEqual([c["name"] for c in r.json()], ["Wanjiku"])

        r = patch_json(self.client, f"/api/community-contacts/{contact_id}", {"phone": "+2548"}, self.nairobi_admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["phone"], "+2548")

        r = self.client.delete(f"/api/community-contacts/{contact_id}", **auth_header(self.nairobi_admin))
        self.assertEqual(r.status_code, 200)

    def test_other_community_admin_denied(self):
        url = f"/api/community-contacts/community/{self.mombasa.pk}"
        r = post_json(self.client, url, {"name": "X", "phone": "1", "email": "x@fof.co.ke"}, self.nairobi_admin)
        self.assertEqual(r.status_code, 403)

    def test_contact_requires_fields(self):
        url = f"/api/community-contacts/community/{self.nairobi.pk}"
        r = post_json(self.client, url, {"name": "X"}, self.admin)
        self.assertEqual(r.status_code, 400)
        self.assertIn("phone is required", r.json()["details"]["phone"])
