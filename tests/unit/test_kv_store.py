# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Tests key ordering, prefix listing, atomic checks and the JSON file snapshot.

import tempfile
from pathlib import Path
from unittest import IsolatedAsyncioTestCase, TestCase
from unittest.mock import patch

from yawt.core.config import Settings
from yawt.core.errors import StorageError
from yawt.store import JsonFileKvStore, KvStore, open_store
from yawt.store.kv import as_key


async def collect(store, prefix, **kwargs):
    return [entry async for entry in store.list(prefix, **kwargs)]


class KeyTest(TestCase):
    def test_rejects_bad_keys(self):
        with self.assertRaises(ValueError):
            as_key(())
        with self.assertRaises(TypeError):
            as_key(("a", True))
        with self.assertRaises(TypeError):
            as_key(("a", 1.5))


class KvStoreTest(IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = KvStore()

    async def test_get_missing_key(self):
        entry = await self.store.get(("a", "b"))
        self.assertIsNone(entry.value)
        self.assertIsNone(entry.versionstamp)

    async def test_set_then_get_returns_copy(self):
        result = await self.store.set(("a", "b"), {"n": [1]})
        self.assertTrue(result.ok)
        entry = await self.store.get(("a", "b"))
        self.assertEqual(entry.versionstamp, result.versionstamp)
        entry.value["n"].append(2)
        self.assertEqual((await self.store.get(("a", "b"))).value, {"n": [1]})

    async def test_versionstamps_increase(self):
        first = await self.store.set(("a",), 1)
        second = await self.store.set(("a",), 2)
        self.assertLess(first.versionstamp, second.versionstamp)

    async def test_list_orders_by_key_parts(self):
        await self.store.set(("p", "x"), 1)
        await self.store.set(("p", 2), 2)
        await self.store.set(("p", "b"), 3)
        await self.store.set(("p", 10), 4)
        await self.store.set(("p",), "prefix itself")
        await self.store.set(("q", "a"), 5)

        entries = await collect(self.store, ("p",))
        self.assertEqual([e.key[-1] for e in entries], ["b", "x", 2, 10])

        entries = await collect(self.store, ("p",), reverse=True, limit=2)
        self.assertEqual([e.key[-1] for e in entries], [10, 2])

    async def test_atomic_check_rejects_stale_versionstamp(self):
        await self.store.set(("k",), "v1")
        stale = await self.store.get(("k",))
        await self.store.set(("k",), "v2")

        result = await self.store.atomic().check_entry(stale).set(("k",), "v3").set(("other",), 1).commit()
        self.assertFalse(result.ok)
        self.assertEqual((await self.store.get(("k",))).value, "v2")
        self.assertIsNone((await self.store.get(("other",))).value)

    async def test_atomic_check_absent(self):
        first = await self.store.atomic().check(("new",), None).set(("new",), 1).commit()
        second = await self.store.atomic().check(("new",), None).set(("new",), 2).commit()
        self.assertTrue(first.ok)
        self.assertFalse(second.ok)
        self.assertEqual((await self.store.get(("new",))).value, 1)

    async def test_atomic_mutations_share_one_versionstamp(self):
        result = await self.store.atomic().set(("a",), 1).set(("b",), 2).delete(("c",)).commit()
        a, b = await self.store.get_many([("a",), ("b",)])
        self.assertEqual(a.versionstamp, result.versionstamp)
        self.assertEqual(b.versionstamp, result.versionstamp)


class JsonFileKvStoreTest(IsolatedAsyncioTestCase):
    def setUp(self):
        self.td = tempfile.TemporaryDirectory()
        self.addCleanup(self.td.cleanup)
        self.path = Path(self.td.name) / "data" / "store.json"

    async def test_snapshot_survives_reopen(self):
        store = JsonFileKvStore(self.path)
        await store.set(("yawt", "series", 1, "s1"), {"title": "Saga"})
        written = await store.set(("yawt", "series", 1, "s2"), {"title": "Other"})
        await store.delete(("yawt", "series", 1, "s2"))
        self.assertTrue(self.path.exists())

        reopened = JsonFileKvStore(self.path)
        entry = await reopened.get(("yawt", "series", 1, "s1"))
        self.assertEqual(entry.value, {"title": "Saga"})
        self.assertIsNone((await reopened.get(("yawt", "series", 1, "s2"))).value)

        later = await reopened.set(("x",), 1)
        self.assertGreater(later.versionstamp, written.versionstamp)

    async def test_failed_save_leaves_store_unchanged(self):
        store = JsonFileKvStore(self.path)
        kept = await store.set(("k",), "saved")

        with patch.object(Path, "write_text", side_effect=OSError("disk full")):
            with self.assertLogs("yawt.store.kv", level="ERROR"):
                with self.assertRaises(StorageError) as ctx:
                    await store.atomic().set(("k",), "lost").set(("new",), 1).delete(("k2",)).commit()
        self.assertEqual(ctx.exception.status_code, 500)

        entry = await store.get(("k",))
        self.assertEqual(entry.value, "saved")
        self.assertEqual(entry.versionstamp, kept.versionstamp)
        self.assertIsNone((await store.get(("new",))).value)
        self.assertFalse(self.path.with_name(self.path.name + ".tmp").exists())
        self.assertIsNone((await JsonFileKvStore(self.path).get(("new",))).value)

        later = await store.set(("new",), 2)
        self.assertTrue(later.ok)
        self.assertEqual((await JsonFileKvStore(self.path).get(("new",))).value, 2)

    async def test_failed_save_restores_deleted_keys(self):
        store = JsonFileKvStore(self.path)
        await store.set(("k",), "saved")
        with patch("yawt.store.kv.os.replace", side_effect=OSError("read-only")):
            with self.assertLogs("yawt.store.kv", level="ERROR"):
                with self.assertRaises(StorageError):
                    await store.delete(("k",))
        self.assertEqual((await store.get(("k",))).value, "saved")

    async def test_corrupt_file_raises(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(RuntimeError):
            JsonFileKvStore(self.path)

    def test_open_store_picks_implementation(self):
        self.assertIs(type(open_store(Settings())), KvStore)
        self.assertIsInstance(open_store(Settings(data_path=self.path)), JsonFileKvStore)
