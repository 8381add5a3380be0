from __future__ import annotations

from django.test import TestCase

from festcore.apps.accounts.models import Profile
from festcore.apps.core.testing import auth_header, make_community, make_sport, make_user, patch_json, post_json
from festcore.apps.leaderboard.models import LeaderboardEntry


class StandingsTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.nairobi = make_community("Nairobi Central")
        cls.mombasa = make_community("Mombasa Coast")
        cls.kisumu = make_community("Kisumu Lakeside")
        cls.football = make_sport("Football", type="team")
        cls.swimming = make_sport("Swimming")
        for community, sport, score in (
            (cls.nairobi, cls.football, 10),
            (cls.nairobi, cls.swimming, 5),
            (cls.mombasa, cls.football, 15),
            (cls.kisumu, cls.swimming, 3),
        ):
            LeaderboardEntry.objects.create(community=community, sport=sport, score=score)

    def test_overall_sums_and_breaks_ties_by_name(self):
        r = self.client.get("/api/leaderboard")
        self.assertEqual(r.status_code, 200)
        rows = [(x["rank"], x["communityName"], x["totalScore"]) for x in r.json()]
        self.assertEqual(rows, [
            (1, "Mombasa Coast", 15),
            (2, "Nairobi Central", 15),
            (3, "Kisumu Lakeside", 3),
        ])

    def test_per_sport(self):
        r = self.client.get(f"/api/leaderboard/sport/{self.swimming.pk}")
        self.assertEqual([(x["rank"], x["communityName"]) for x in r.json()],
                         [(1, "Nairobi Central"), (2, "Kisumu Lakeside")])

    def test_per_community(self):
        r = self.client.get(f"/api/leaderboard/community/{self.nairobi.pk}")
        self.assertEqual([x["sportName"] for x in r.json()], ["Football", "Swimming"])


class EntryWriteTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_user("root", Profile.ROLE_ADMIN)
        cls.community_admin = make_user("cadmin", Profile.ROLE_COMMUNITY_ADMIN)
        cls.nairobi = make_community("Nairobi Central")
        cls.mombasa = make_community("Mombasa Coast")
        cls.football = make_sport("Football", type="team")

    def test_upsert(self):
        payload = {"communityId": self.nairobi.pk, "sportId": self.football.pk, "score": 7, "medalType": "gold"}
        r = post_json(self.client, "/api/leaderboard", payload, self.admin)
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["medalType"], "gold")

        r = post_json(self.client, "/api/leaderboard", dict(payload, score=9, position=1), self.admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual((r.json()["score"], r.json()["position"], r.json()["medalType"]), (9, 1, "gold"))
        self.assertEqual(LeaderboardEntry.objects.count(), 1)

    def test_upsert_requires_admin(self):
        payload = {"communityId": self.nairobi.pk, "sportId": self.football.pk, "score": 7}
        r = post_json(self.client, "/api/leaderboard", payload, self.community_admin)
        self.assertEqual(r.status_code, 403)
        r = post_json(self.client, "/api/leaderboard", payload)
        self.assertEqual(r.status_code, 401)

    def test_validation(self):
        r = post_json(self.client, "/api/leaderboard",
                      {"communityId": self.nairobi.pk, "sportId": self.football.pk, "score": -1}, self.admin)
        self.assertEqual(r.status_code, 400)
        r = post_json(self.client, "/api/leaderboard",
                      {"communityId": 9999, "sportId": self.football.pk, "score": 1}, self.admin)
        self.assertEqual(r.status_code, 404)

    def test_patch_conflict_and_delete(self):
        a = LeaderboardEntry.objects.create(community=self.nairobi, sport=self.football, score=1)
        b = LeaderboardEntry.objects.create(community=self.mombasa, sport=self.football, score=2)

        r = patch_json(self.client, f"/api/leaderboard/{b.pk}", {"communityId": self.nairobi.pk}, self.admin)
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "Entry already exists for this community and sport")

        r = patch_json(self.client, f"/api/leaderboard/{b.pk}", {"score": 20, "notes": "final"}, self.admin)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["score"], 20)

        r = self.client.get("/api/leaderboard/entries", **auth_header(self.admin))
        self.assertEqual([e["id"] for e in r.json()], [b.pk, a.pk])

        r = self.client.delete(f"/api/leaderboard/{a.pk}", **auth_header(self.admin))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(LeaderboardEntry.objects.filter(pk=a.pk).exists())
