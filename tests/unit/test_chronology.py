# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Tests date parsing and the chronological scene view, including timeline filtering.

from unittest import IsolatedAsyncioTestCase, TestCase

from yawt.core.errors import NotFoundError, ValidationError
from yawt.services import books_ops, scenes_ops, series_ops, timelines_ops
from yawt.services.chronology import date_sort_key, list_chronological, parse_date
from yawt.services.db import StoryDb
from yawt.store import KvStore

USER = 7


def scene_text(**attrs):
    lines = [f"{k}: {v}" for k, v in attrs.items()]
    return "---\n" + "\n".join(lines) + "\n---\nBody"


class ParseDateTest(TestCase):
    def test_iso_and_fallback_formats(self):
        self.assertEqual(parse_date("1970-01-02"), 86400.0)
        self.assertEqual(parse_date("1970-01-01T00:00:00Z"), 0.0)
        self.assertEqual(parse_date("January 2, 1970"), 86400.0)
        self.assertEqual(parse_date("1970/01/02"), 86400.0)
        self.assertIsNotNone(parse_date("2024"))

    def test_unparseable(self):
        self.assertIsNone(parse_date("not-a-date"))
        self.assertIsNone(parse_date("the third age"))

    def test_sort_key_tiers(self):
        parsed = date_sort_key("2024-03-01")
        self.assertLess(parsed, date_sort_key("not-a-date"))
        self.assertLess(date_sort_key("not-a-date"), date_sort_key(None))
        self.assertEqual(date_sort_key(""), date_sort_key(None))


class ChronologyTest(IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.db = StoryDb(KvStore())
        self.series = await series_ops.create_series(self.db, USER, {"title": "Saga"})
        self.book1 = await books_ops.create_book(self.db, USER, self.series.id, {"title": "One"})
        self.book2 = await books_ops.create_book(self.db, USER, self.series.id, {"title": "Two"})

    async def _scene(self, book, text):
        return await scenes_ops.create_scene(
            self.db, USER, self.series.id, book.id, {"text": text}
        )

    async def test_scenes_sorted_by_date_across_books(self):
        await self._scene(self.book1, scene_text(title="Late", startDate="2024-03-01"))
        await self._scene(self.book1, scene_text(title="Vague", startDate="not-a-date"))
        await self._scene(self.book2, scene_text(title="EndOnly", endDate="2024-01-01"))
        await self._scene(self.book2, scene_text(title="Early", startDate="2023-12-31"))
        await self._scene(self.book2, "No dates at all")

        events = await list_chronological(self.db, USER, self.series.id)
        self.assertEqual([e.title for e in events], ["Early", "Late", "Vague", "EndOnly"])
        early = events[0]
        self.assertEqual(early.book_id, self.book2.id)
        self.assertEqual(early.book_title, "Two")
        self.assertEqual(early.start_date, "2023-12-31")

    async def test_ties_fall_back_to_end_date_then_title(self):
        await self._scene(self.book1, scene_text(title="B", startDate="2024-01-01"))
        await self._scene(self.book1, scene_text(title="A", startDate="2024-01-01"))
        await self._scene(
            self.book1, scene_text(title="C", startDate="2024-01-01", endDate="2024-01-02")
        )
        events = await list_chronological(self.db, USER, self.series.id)
        self.assertEqual([e.title for e in events], ["C", "A", "B"])

    async def test_untitled_scene_gets_placeholder_title(self):
        scene = await self._scene(self.book1, scene_text(startDate="2024-01-01"))
        (event,) = await list_chronological(self.db, USER, self.series.id)
        self.assertEqual(event.title, f"Scene {scene.id[:6]}")

    async def test_timeline_filter(self):
        main = await timelines_ops.create_timeline(self.db, USER, self.series.id, {"title": "Main"})
        await self._scene(self.book1, scene_text(title="Tagged", startDate="2024-01-01", timelines=f"[{main.id}]"))
        await self._scene(self.book1, scene_text(title="Elsewhere", startDate="2024-01-02", timelines="[other]"))
        await self._scene(self.book1, scene_text(title="Untagged", startDate="2024-01-03"))

        events = await timelines_ops.list_timeline_events(self.db, USER, self.series.id, main.id)
        self.assertEqual([e.title for e in events], ["Tagged", "Untagged"])

        everything = await list_chronological(self.db, USER, self.series.id)
        self.assertEqual(len(everything), 3)

    async def test_timeline_events_cannot_be_written(self):
        main = await timelines_ops.create_timeline(self.db, USER, self.series.id, {"title": "Main"})
        with self.assertRaises(ValidationError) as ctx:
            await timelines_ops.create_timeline_event(self.db, USER, self.series.id, main.id)
        self.assertEqual(ctx.exception.detail, timelines_ops.DERIVED_EVENTS_MESSAGE)
        with self.assertRaises(ValidationError):
            await timelines_ops.reorder_timeline_event(self.db, USER, self.series.id, main.id)
        with self.assertRaises(NotFoundError):
            await timelines_ops.list_timeline_events(self.db, USER, self.series.id, "missing")

    async def test_missing_series(self):
        with self.assertRaises(NotFoundError):
            await list_chronological(self.db, USER, "missing")
