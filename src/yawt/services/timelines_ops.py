# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Implements timelines, whose events are derived from scene frontmatter rather than stored.

from typing import Dict, List

from yawt.core.errors import ValidationError
from yawt.services.chronology import list_chronological
from yawt.services.common import apply_required_string
from yawt.services.db import StoryDb
from yawt.services.series_ops import require_series_entry
from yawt.story.models import SceneEventView, Timeline
from yawt.story.normalize import (
    apply_optional_string,
    normalize_optional_string,
    normalize_required_string,
)

DERIVED_EVENTS_MESSAGE = (
    "Timeline events are derived from scenes. Add startDate/endDate "
    "(and optional timelines: [<timeline_id>]) in scene YAML frontmatter."
)
DERIVED_ORDER_MESSAGE = (
    "Timeline events are ordered chronologically by startDate/endDate, "
    "not manually ranked."
)


def _scope(user_id: int, series_id: str):
    return (user_id, series_id)


async def list_timelines(db: StoryDb, user_id: int, series_id: str) -> List[Timeline]:
    await require_series_entry(db, user_id, series_id)
    return await db.timelines.list(_scope(user_id, series_id))


async def create_timeline(db: StoryDb, user_id: int, series_id: str, payload: dict) -> Timeline:
    series_entry = await require_series_entry(db, user_id, series_id)
    data = {
        "user_id": user_id,
        "series_id": series_id,
        "title": normalize_required_string(payload.get("title"), "title"),
        "description": normalize_optional_string(payload.get("description")),
    }
    return await db.timelines.create(_scope(user_id, series_id), data, parent=series_entry)


async def get_timeline(db: StoryDb, user_id: int, series_id: str, timeline_id: str) -> Timeline:
    return await db.timelines.require(_scope(user_id, series_id), timeline_id)


async def update_timeline(
    db: StoryDb, user_id: int, series_id: str, timeline_id: str, payload: dict
) -> Timeline:
    changes: Dict[str, object] = {}
    apply_required_string(changes, payload, "title")
    apply_optional_string(changes, payload, "description")
    return await db.timelines.update(_scope(user_id, series_id), timeline_id, changes)


async def delete_timeline(db: StoryDb, user_id: int, series_id: str, timeline_id: str) -> None:
    await db.timelines.delete(_scope(user_id, series_id), timeline_id)


async def list_timeline_events(
    db: StoryDb, user_id: int, series_id: str, timeline_id: str
) -> List[SceneEventView]:
    await db.timelines.require_entry(_scope(user_id, series_id), timeline_id)
    return await list_chronological(db, user_id, series_id, timeline_id)


async def create_timeline_event(db: StoryDb, user_id: int, series_id: str, timeline_id: str) -> None:
    await db.timelines.require_entry(_scope(user_id, series_id), timeline_id)
    raise ValidationError(DERIVED_EVENTS_MESSAGE)


async def reorder_timeline_event(db: StoryDb, user_id: int, series_id: str, timeline_id: str) -> None:
    await db.timelines.require_entry(_scope(user_id, series_id), timeline_id)
    raise ValidationError(DERIVED_ORDER_MESSAGE)
