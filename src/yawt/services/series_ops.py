# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Implements series CRUD, the top-level container every other record hangs off.

from typing import Dict, List

from yawt.services.common import apply_required_string
from yawt.services.db import StoryDb
from yawt.store import KvEntry
from yawt.story.models import Series
from yawt.story.normalize import (
    apply_optional_string,
    normalize_optional_string,
    normalize_required_string,
)


async def require_series_entry(db: StoryDb, user_id: int, series_id: str) -> KvEntry:
    return await db.series.require_entry((user_id,), series_id)


async def list_series(db: StoryDb, user_id: int) -> List[Series]:
    return await db.series.list((user_id,))


async def create_series(db: StoryDb, user_id: int, payload: dict) -> Series:
    data = {
        "user_id": user_id,
        "title": normalize_required_string(payload.get("title"), "title"),
        "description": normalize_optional_string(payload.get("description")),
    }
    return await db.series.create((user_id,), data)


async def get_series(db: StoryDb, user_id: int, series_id: str) -> Series:
    return await db.series.require((user_id,), series_id)


async def update_series(db: StoryDb, user_id: int, series_id: str, payload: dict) -> Series:
    changes: Dict[str, object] = {}
    apply_required_string(changes, payload, "title")
    apply_optional_string(changes, payload, "description")
    return await db.series.update((user_id,), series_id, changes)


async def delete_series(db: StoryDb, user_id: int, series_id: str) -> None:
    """Books must be removed first; a series with books is left untouched."""
    await db.series.delete(
        (user_id,), series_id, children=(db.books, (user_id, series_id))
    )
