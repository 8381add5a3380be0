from __future__ import annotations

from django.test import TestCase

from festcore.apps.accounts.models import Profile
from festcore.apps.core.testing import (
    auth_header,
    make_sport,
    make_user,
    patch_json,
    post_json,
    put_json,
)
from festcore.apps.sports.models import Sport, SportIncompatibility
from festcore.apps.sports.services.taxonomy import find_incompatible_pair, mark_incompatible, resolve_sport_labels


class TaxonomyTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.athletics = make_sport("Athletics")
        cls.sprint = make_sport("100m", parent=cls.athletics)
        cls.relay = make_sport("Relay", parent=cls.athletics)
        cls.swimming = make_sport("Swimming")
        cls.swim_sprint = make_sport("100m", parent=cls.swimming)
        cls.chess = make_sport("Chess", active=False)

    def test_parent_child_label(self):
        res = resolve_sport_labels("athletics - 100M, Relay")
        self.assertTrue(res.ok)
        self.assertEqual(res.sport_ids, [self.sprint.pk, self.relay.pk])

    def test_bare_name_shared_by_two_children_is_ambiguous(self):
        res = resolve_sport_labels("100m")
        self.assertFalse(res.ok)
        self.assertEqual(res.ambiguous, ["100m"])
        self.assertIn('"Parent - Child"', res.error)

    def test_missing_and_inactive(self):
        res = resolve_sport_labels("Chess, Athletics - Marathon, Relay")
        self.assertEqual(res.missing, ["Chess", "Athletics - Marathon"])
        self.assertEqual(res.sport_ids, [self.relay.pk])
        self.assertEqual(res.error, "Sports not found: Chess, Athletics - Marathon")

    def test_repeated_labels_collapse(self):
        res = resolve_sport_labels("Relay, Athletics - Relay")
        self.assertEqual(res.sport_ids, [self.relay.pk])

    def test_incompatibility_is_symmetric(self):
        mark_incompatible(self.sprint, self.swim_sprint)
        a, b = find_incompatible_pair([self.swim_sprint.pk, self.relay.pk, self.sprint.pk])
        self.assertEqual((a.pk, b.pk), (self.swim_sprint.pk, self.sprint.pk))
        self.assertIsNone(find_incompatible_pair([self.sprint.pk]))
        self.assertIsNone(find_incompatible_pair([self.sprint.pk, self.relay.pk]))


class SportApiTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.athletics = make_sport("Athletics")
        cls.sprint = make_sport("100m", parent=cls.athletics)
        cls.football = make_sport("Football", type="team")
        cls.basketball = make_sport("Basketball", type="team")
        cls.athletics_admin = make_user("athletics_admin", Profile.ROLE_SPORTS_ADMIN, sport=cls.athletics)

    def test_public_reads(self):
        r = self.client.get("/api/sports")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.json()), 4)

        r = self.client.get("/api/sports/tree")
        tree = {node["parent"]["name"]: [c["name"] for c in node["children"]] for node in r.json()}
        self.assertEqual(tree, {"Athletics": ["100m"], "Basketball": [], "Football": []})

        r = self.client.get(f"/api/sports/subsports/{self.athletics.pk}")
        self.assertEqual([s["displayName"] for s in r.json()], ["Athletics - 100m"])

        r = self.client.get(f"/api/sports/{self.sprint.pk}")
        self.assertEqual(r.json()["parent"]["name"], "Athletics")

    def test_create_with_admin_login(self):
        r = post_json(self.client, "/api/sports", {
            "name": "Volleyball", "type": "team", "requiresTeamName": True,
            "adminUsername": "volley_admin", "adminPassword": "secret1",
        }, self.admin)
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertTrue(body["active"])
        self.assertTrue(body["requiresTeamName"])
        self.assertEqual(body["adminUsername"], "volley_admin")

        r = post_json(self.client, "/api/auth/sports-admin/login",
                      {"username": "volley_admin", "password": "secret1"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["sportId"], body["id"])

    def test_taxonomy_depth_is_two(self):
        r = post_json(self.client, "/api/sports", {"name": "Heats", "type": "individual", "parentId": self.sprint.pk},
                      self.admin)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Sub-sports cannot have sub-sports of their own")

        r = patch_json(self.client, f"/api/sports/{self.athletics.pk}", {"parentId": self.football.pk}, self.admin)
        self.assertEqual(r.status_code, 400)

    def test_invalid_age_limits(self):
        r = patch_json(self.client, f"/api/sports/{self.football.pk}",
                       {"ageLimitMin": 30, "ageLimitMax": 18}, self.admin)
        self.assertEqual(r.status_code, 400)

    def test_put_incompatibilities_replaces_both_directions(self):
        r = put_json(self.client, f"/api/sports/{self.football.pk}/incompatibilities",
                     {"sportIds": [self.basketball.pk, self.sprint.pk]}, self.admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["incompatibleSportIds"], sorted([self.basketball.pk, self.sprint.pk]))
        self.assertEqual(SportIncompatibility.objects.count(), 4)

        r = self.client.get(f"/api/sports/{self.basketball.pk}")
        self.assertEqual(r.json()["incompatibleSportIds"], [self.football.pk])

        r = put_json(self.client, f"/api/sports/{self.football.pk}/incompatibilities",
                     {"sportIds": [self.sprint.pk]}, self.admin)
        self.assertEqual(r.json()["incompatibleSportIds"], [self.sprint.pk])
        self.assertFalse(SportIncompatibility.objects.filter(sport=self.basketball).exists())

        r = put_json(self.client, f"/api/sports/{self.football.pk}/incompatibilities",
                     {"sportIds": [9999]}, self.admin)
        self.assertEqual(r.status_code, 404)

    def test_sports_admin_scope(self):
        r = patch_json(self.client, f"/api/sports/{self.sprint.pk}", {"venue": "Main Track"}, self.athletics_admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["venue"], "Main Track")

        r = patch_json(self.client, f"/api/sports/{self.football.pk}", {"venue": "Field"}, self.athletics_admin)
        self.assertEqual(r.status_code, 403)

        r = post_json(self.client, "/api/sports", {"name": "Long Jump", "type": "individual",
                                                   "parentId": self.athletics.pk}, self.athletics_admin)
        self.assertEqual(r.status_code, 201)

        r = post_json(self.client, "/api/sports", {"name": "Rugby", "type": "team"}, self.athletics_admin)
        self.assertEqual(r.status_code, 403)

    def test_delete_cascades_children(self):
        r = self.client.delete(f"/api/sports/{self.athletics.pk}", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(Sport.objects.filter(pk=self.sprint.pk).exists())

    def test_writes_require_manager(self):
        volunteer = make_user("vol", Profile.ROLE_VOLUNTEER)
        r = post_json(self.client, "/api/sports", {"name": "X", "type": "team"}, volunteer)
        self.assertEqual(r.status_code, 403)
        r = post_json(self.client, "/api/sports", {"name": "X", "type": "team"})
        self.assertEqual(r.status_code, 401)


class ConvenorAndScheduleTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.football = make_sport("Football", type="team")
        cls.swimming = make_sport("Swimming")
        cls.swim_admin = make_user("swim_admin", Profile.ROLE_SPORTS_ADMIN, sport=cls.swimming)

    def test_convenor_one_per_sport(self):
        payload = {"name": "Otieno", "phone": "+2547", "email": "otieno@fof.co.ke", "sportId": self.football.pk}
        r = post_json(self.client, "/api/convenors", payload, self.admin)
        self.assertEqual(r.status_code, 201)

        r = post_json(self.client, "/api/convenors", dict(payload, name="Other"), self.admin)
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "This sport already has a convenor")

        r = self.client.get(f"/api/convenors/sport/{self.football.pk}")
        self.assertEqual(r.json()["name"], "Otieno")
        r = self.client.get(f"/api/convenors/sport/{self.swimming.pk}")
        self.assertEqual(r.status_code, 404)

    def test_sports_admin_convenor_scope(self):
        r = post_json(self.client, "/api/convenors",
                      {"name": "A", "phone": "1", "email": "a@fof.co.ke", "sportId": self.football.pk}, self.swim_admin)
        self.assertEqual(r.status_code, 403)

        r = post_json(self.client, "/api/convenors", {"name": "A", "phone": "1", "email": "a@fof.co.ke"}, self.swim_admin)
        self.assertEqual(r.status_code, 403)

        r = post_json(self.client, "/api/convenors",
                      {"name": "A", "phone": "1", "email": "a@fof.co.ke", "sportId": self.swimming.pk}, self.swim_admin)
        self.assertEqual(r.status_code, 201)

    def test_tournament_formats(self):
        r = post_json(self.client, "/api/tournament-formats",
                      {"category": "Football", "title": "Knockout", "content": "Groups then knockout"}, self.admin)
        self.assertEqual(r.status_code, 201)
        r = post_json(self.client, "/api/tournament-formats",
                      {"category": "football", "title": "Again", "content": "x"}, self.admin)
        self.assertEqual(r.status_code, 409)

        r = self.client.get("/api/tournament-formats/category/FOOTBALL")
        self.assertEqual(r.json()["title"], "Knockout")

        r = post_json(self.client, "/api/tournament-formats",
                      {"category": "Chess", "title": "Swiss", "content": "x"}, self.swim_admin)
        self.assertEqual(r.status_code, 403)

    def test_calendar(self):
        r = post_json(self.client, "/api/calendar", {
            "sportId": self.swimming.pk, "date": "2026-11-20", "time": "09:00", "venue": "Aquatic Centre",
            "type": "Heats",
        }, self.admin)
        self.assertEqual(r.status_code, 201)
        item_id = r.json()["id"]

        self.assertEqual(self.client.get("/api/calendar/timing").status_code, 401)
        r = self.client.get("/api/calendar/timing", **auth_header(self.swim_admin))
        self.assertEqual(r.json(), [
            {"sportId": self.swimming.pk, "time": "09:00", "date": "2026-11-20", "venue": "Aquatic Centre"},
        ])

        r = patch_json(self.client, f"/api/calendar/{item_id}", {"venue": "Pool B"}, self.admin)
        self.assertEqual(r.json()["venue"], "Pool B")

        r = patch_json(self.client, f"/api/calendar/{item_id}", {"venue": "Pool C"}, self.swim_admin)
        self.assertEqual(r.status_code, 403)
