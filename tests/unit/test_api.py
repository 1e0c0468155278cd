# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exercises the HTTP API end to end against an in-memory store.

import asyncio
from unittest import TestCase

from fastapi.testclient import TestClient

from yawt.core.config import Settings
from yawt.main import create_app
from yawt.session import set_user
from yawt.store import KvStore
from yawt.story.models import User


class ApiTestBase(TestCase):
    def setUp(self):
        self.store = KvStore()
        self.app = create_app(settings=Settings(), store=self.store, configure_logging=False)
        self.client = self.sign_in("sid-ann", User(id=1, login="ann"))

    def sign_in(self, session_id, user):
        asyncio.run(set_user(self.store, session_id, user))
        client = TestClient(self.app)
        client.cookies.set("site-session", session_id)
        return client

    def create(self, path, payload):
        resp = self.client.post(path, json=payload)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def make_series(self, title="Saga"):
        return self.create("/api/series", {"title": title})["series"]["id"]


class AuthApiTest(ApiTestBase):
    def test_requires_session(self):
        anonymous = TestClient(self.app)
        resp = anonymous.get("/api/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"ok": False, "detail": "Unauthorized"})
        self.assertEqual(anonymous.get("/api/series").status_code, 401)

        stranger = TestClient(self.app)
        stranger.cookies.set("site-session", "unknown")
        self.assertEqual(stranger.get("/api/me").status_code, 401)

    def test_me_and_signout(self):
        resp = self.client.get("/api/me")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["login"], "ann")

        resp = self.client.get("/auth/signout")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["ok"])

        again = TestClient(self.app)
        again.cookies.set("site-session", "sid-ann")
        self.assertEqual(again.get("/api/me").status_code, 401)

    def test_users_cannot_see_each_other(self):
        series_id = self.make_series()
        bob = self.sign_in("sid-bob", User(id=2, login="bob"))
        self.assertEqual(bob.get("/api/series").json()["series"], [])
        resp = bob.get(f"/api/series/{series_id}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"ok": False, "detail": "Series not found"})


class StoryApiTest(ApiTestBase):
    def test_series_crud(self):
        series_id = self.make_series()
        resp = self.client.put(f"/api/series/{series_id}", json={"description": "Long"})
        self.assertEqual(resp.json()["series"]["description"], "Long")
        self.assertEqual(resp.json()["series"]["title"], "Saga")

        resp = self.client.put(f"/api/series/{series_id}", json={"title": " "})
        self.assertEqual(resp.status_code, 400)

        listed = self.client.get("/api/series").json()["series"]
        self.assertEqual([s["id"] for s in listed], [series_id])

        resp = self.client.delete(f"/api/series/{series_id}")
        self.assertEqual(resp.json(), {"ok": True, "message": "Series deleted"})
        self.assertEqual(self.client.get(f"/api/series/{series_id}").status_code, 404)

    def test_invalid_json_body(self):
        resp = self.client.post(
            "/api/series", content="{bad", headers={"content-type": "application/json"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Invalid JSON in request body")

    def test_books_reorder(self):
        series_id = self.make_series()
        base = f"/api/series/{series_id}/books"
        ids = [self.create(base, {"title": t})["book"]["id"] for t in ("A", "B", "C")]

        resp = self.client.post(f"{base}/{ids[2]}/reorder", json={"before_book_id": ids[1]})
        self.assertEqual(resp.status_code, 200, resp.text)
        titles = [b["title"] for b in self.client.get(base).json()["books"]]
        self.assertEqual(titles, ["A", "C", "B"])

        resp = self.client.post(f"{base}/{ids[0]}/reorder", json={})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(f"{base}/{ids[0]}/reorder", json={"after_book_id": "missing"})
        self.assertEqual(resp.status_code, 404)

    def test_scenes_and_non_empty_delete(self):
        series_id = self.make_series()
        book_id = self.create(f"/api/series/{series_id}/books", {"title": "One"})["book"]["id"]
        scenes = f"/api/series/{series_id}/books/{book_id}/scenes"
        scene = self.create(scenes, {"text": "---\ntitle: Opening\n---\nIt begins."})["scene"]
        self.assertEqual(scene["derived"], {"title": "Opening"})

        resp = self.client.delete(f"/api/series/{series_id}/books/{book_id}")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["detail"], "Book is not empty. Delete scenes first.")
        self.assertEqual(self.client.get(f"/api/series/{series_id}/books/{book_id}").status_code, 200)

        resp = self.client.put(f"{scenes}/{scene['id']}", json={"text": "Plain"})
        self.assertEqual(resp.json()["scene"]["derived"], {})

        self.assertEqual(self.client.delete(f"{scenes}/{scene['id']}").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/series/{series_id}/books/{book_id}").status_code, 200)
        self.assertEqual(self.client.get(f"{scenes}").status_code, 404)

    def test_missing_book(self):
        series_id = self.make_series()
        resp = self.client.get(f"/api/series/{series_id}/books/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Book not found")


class SourcebookApiTest(ApiTestBase):
    def setUp(self):
        super().setUp()
        self.series_id = self.make_series()
        self.base = f"/api/series/{self.series_id}"

    def test_characters(self):
        character = self.create(
            f"{self.base}/characters",
            {"name": "Ann", "image": {"object_key": "img/ann.png"}, "extra": {"age": 31}},
        )["character"]
        self.assertEqual(character["extra"], {"age": 31})
        path = f"{self.base}/characters/{character['id']}"

        resp = self.client.put(path, json={"description": "Thief", "extra": None})
        self.assertEqual(resp.json()["character"]["description"], "Thief")
        self.assertNotIn("extra", resp.json()["character"])

        self.assertEqual(self.client.put(path, json={"name": ""}).status_code, 400)
        self.assertEqual(self.client.post(f"{self.base}/characters", json={}).status_code, 400)
        self.assertEqual(self.client.delete(path).status_code, 200)
        self.assertEqual(self.client.get(path).status_code, 404)

    def test_locations(self):
        location = self.create(
            f"{self.base}/locations",
            {
                "name": "Vault",
                "tags": ["bank", "bank"],
                "links": [{"location_id": "street", "kind": "exit"}],
                "coords": {"x": 1.5, "y": 2},
            },
        )["location"]
        self.assertEqual(location["tags"], ["bank"])
        self.assertEqual(location["coords"], {"x": 1.5, "y": 2.0})

        listed = self.client.get(f"{self.base}/locations").json()["locations"]
        self.assertEqual([loc["name"] for loc in listed], ["Vault"])

        resp = self.client.put(f"{self.base}/locations/{location['id']}", json={"coords": "bad"})
        self.assertEqual(resp.status_code, 400)


class TimelineApiTest(ApiTestBase):
    def setUp(self):
        super().setUp()
        self.series_id = self.make_series()
        self.base = f"/api/series/{self.series_id}"

    def test_timeline_events_are_derived_from_scenes(self):
        timeline_id = self.create(f"{self.base}/timelines", {"title": "Main"})["timeline"]["id"]
        book_id = self.create(f"{self.base}/books", {"title": "One"})["book"]["id"]
        scenes = f"{self.base}/books/{book_id}/scenes"
        self.create(scenes, {"text": f"---\ntitle: Second\nstartDate: 2024-02-01\ntimelines: [{timeline_id}]\n---\n"})
        self.create(scenes, {"text": "---\ntitle: First\nstartDate: 2024-01-01\n---\n"})
        self.create(scenes, {"text": "---\ntitle: Aside\nstartDate: 2023-01-01\ntimelines: [other]\n---\n"})

        resp = self.client.get(f"{self.base}/timelines/{timeline_id}/events")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([e["title"] for e in resp.json()["events"]], ["First", "Second"])

        resp = self.client.get(f"{self.base}/chronology")
        self.assertEqual([e["title"] for e in resp.json()["events"]], ["Aside", "First", "Second"])

        resp = self.client.get(f"{self.base}/chronology", params={"timeline_id": "other"})
        self.assertEqual([e["title"] for e in resp.json()["events"]], ["Aside", "First"])

    def test_timeline_event_writes_rejected(self):
        timeline_id = self.create(f"{self.base}/timelines", {"title": "Main"})["timeline"]["id"]
        resp = self.client.post(f"{self.base}/timelines/{timeline_id}/events", json={"title": "X"})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["ok"])
        resp = self.client.post(f"{self.base}/timelines/{timeline_id}/events/e1/reorder", json={})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(f"{self.base}/timelines/missing/events", json={})
        self.assertEqual(resp.status_code, 404)

    def test_series_events(self):
        event = self.create(
            f"{self.base}/events",
            {"title": "Coronation", "start_date": "1066-12-25", "character_ids": ["w", "w"]},
        )["event"]
        self.assertEqual(event["character_ids"], ["w"])
        path = f"{self.base}/events/{event['id']}"
        resp = self.client.put(path, json={"start_date": ""})
        self.assertNotIn("start_date", resp.json()["event"])
        self.assertEqual(resp.json()["event"]["title"], "Coronation")
        self.assertEqual(self.client.delete(path).status_code, 200)
        self.assertEqual(self.client.get(f"{self.base}/events").json()["events"], [])
