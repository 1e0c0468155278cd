# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Implements series-level events that reference scenes, characters and a location.

from typing import Dict, List

from yawt.services.common import apply_required_string
from yawt.services.db import StoryDb
from yawt.services.series_ops import require_series_entry
from yawt.story.models import Event
from yawt.story.normalize import (
    apply_optional_string,
    apply_optional_string_list,
    normalize_optional_string,
    normalize_optional_string_list,
    normalize_required_string,
)

_STRING_FIELDS = ("description", "start_date", "end_date", "location_id")
_LIST_FIELDS = ("character_ids", "scene_ids", "tags")


def _scope(user_id: int, series_id: str):
    return (user_id, series_id)


async def list_events(db: StoryDb, user_id: int, series_id: str) -> List[Event]:
    await require_series_entry(db, user_id, series_id)
    return await db.events.list(_scope(user_id, series_id))


async def create_event(db: StoryDb, user_id: int, series_id: str, payload: dict) -> Event:
    series_entry = await require_series_entry(db, user_id, series_id)
    data = {
        "user_id": user_id,
        "series_id": series_id,
        "title": normalize_required_string(payload.get("title"), "title"),
    }
    for key in _STRING_FIELDS:
        data[key] = normalize_optional_string(payload.get(key))
    for key in _LIST_FIELDS:
        data[key] = normalize_optional_string_list(payload.get(key))
    return await db.events.create(_scope(user_id, series_id), data, parent=series_entry)


async def get_event(db: StoryDb, user_id: int, series_id: str, event_id: str) -> Event:
    return await db.events.require(_scope(user_id, series_id), event_id)


async def update_event(db: StoryDb, user_id: int, series_id: str, event_id: str, payload: dict) -> Event:
    changes: Dict[str, object] = {}
    apply_required_string(changes, payload, "title")
    for key in _STRING_FIELDS:
        apply_optional_string(changes, payload, key)
    for key in _LIST_FIELDS:
        apply_optional_string_list(changes, payload, key)
    return await db.events.update(_scope(user_id, series_id), event_id, changes)


async def delete_event(db: StoryDb, user_id: int, series_id: str, event_id: str) -> None:
    await db.events.delete(_scope(user_id, series_id), event_id)
