from __future__ import annotations

import io
import json
from datetime import date

from django.db import IntegrityError
from django.test import RequestFactory, SimpleTestCase, TestCase
from openpyxl import load_workbook

from festcore.apps.core.errors import BadRequest, Conflict, NotFound
from festcore.apps.core.exports import export_response, rows_to_csv, rows_to_xlsx
from festcore.apps.core.http import api_view, json_body, json_response


class ExportTests(SimpleTestCase):
    headers = ["id", "name", "sports", "joined"]

    def test_csv(self):
        out = rows_to_csv([{"id": 1, "name": "Amina", "sports": ["Football"], "joined": None}], self.headers)
        self.assertEqual(out, 'id,name,sports,joined\n1,Amina,"[""Football""]",\n')

    def test_xlsx_column_widths(self):
        rows = [
            {"id": 1, "name": "A", "sports": ["Football", "Swimming"], "joined": "2026-01-01"},
            {"id": 2, "name": "x" * 80, "sports": [], "joined": date(2026, 1, 2).isoformat()},
        ]
        wb = load_workbook(io.BytesIO(rows_to_xlsx(rows, self.headers)))
        ws = wb["Sheet1"]
        self.assertEqual(ws["C2"].value, "Football, Swimming")
        self.assertEqual(ws.column_dimensions["A"].width, 10)
        self.assertEqual(ws.column_dimensions["B"].width, 50)
        self.assertEqual(ws.column_dimensions["C"].width, 18)

    def test_unknown_format(self):
        with self.assertRaises(BadRequest):
            export_response([], self.headers, "pdf", "x")


@api_view(["GET", "POST"])
def _sample(request, mode):
    if mode == "conflict":
        raise Conflict("Already there")
    if mode == "missing":
        raise NotFound("Nothing here")
    if mode == "integrity":
        raise IntegrityError("UNIQUE constraint failed")
    if mode == "boom":
        raise RuntimeError("boom")
    return json_response({"echo": json_body(request)})


class ApiViewTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def call(self, mode, method="get", body=None):
        if method == "post":
            request = self.factory.post("/x", data=body, content_type="application/json")
        else:
            request = getattr(self.factory, method)("/x")
        return _sample(request, mode)

    def body(self, resp):
        return json.loads(resp.content)

    def test_errors_become_json(self):
        cases = {"conflict": (409, "Already there"), "missing": (404, "Nothing here"), "boom": (500, "boom")}
        for mode, (status, message) in cases.items():
            with self.subTest(mode=mode):
                resp = self.call(mode)
                self.assertEqual(resp.status_code, status)
                self.assertEqual(self.body(resp)["error"], message)

        with self.assertLogs("festcore.apps.core.http", level="WARNING"):
            resp = self.call("integrity")
        self.assertEqual(resp.status_code, 409)

    def test_method_not_allowed(self):
        resp = self.call("ok", method="delete")
        self.assertEqual(resp.status_code, 405)
        self.assertEqual(resp["Allow"], "GET, POST")

    def test_invalid_json(self):
        resp = self.call("ok", method="post", body="{not json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.body(resp)["error"], "Invalid JSON body")

        resp = self.call("ok", method="post", body="[1, 2]")
        self.assertEqual(self.body(resp)["error"], "JSON body must be an object")


class HealthTests(TestCase):
    def test_health(self):
        r = self.client.get("/api/health")
        self.assertEqual(r.json(), {"ok": True})
