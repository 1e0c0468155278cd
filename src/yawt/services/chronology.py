# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Chronological scene view.

Scenes become timeline events when their frontmatter carries a start or end
date. Dates are free-form strings; the sort puts parseable dates first in
time order, then present-but-unparseable ones, then missing ones. Ties fall
back to the end date and finally the title, so the order is total.
"""

from __future__ import annotations

import datetime
import math
from typing import List, Optional, Tuple

from yawt.services.db import StoryDb
from yawt.services.series_ops import require_series_entry
from yawt.story.models import Scene, SceneEventView

_FALLBACK_FORMATS = (
    "%Y",
    "%Y-%m",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %Y",
    "%b %Y",
)

_PARSED, _UNPARSEABLE, _MISSING = 0, 1, 2


def parse_date(value: str) -> Optional[float]:
    """Return a POSIX timestamp for ``value``, or ``None`` when it is not a date."""
    text = value.strip()
    parsed: Optional[datetime.datetime] = None
    try:
        parsed = datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    try:
        ts = parsed.timestamp()
    except (OverflowError, OSError, ValueError):
        return None
    return ts if math.isfinite(ts) else None


def date_sort_key(value: Optional[str]) -> Tuple[int, float]:
    if not value:
        return (_MISSING, 0.0)
    ts = parse_date(value)
    if ts is None:
        return (_UNPARSEABLE, 0.0)
    return (_PARSED, ts)


def event_sort_key(event: SceneEventView):
    return (date_sort_key(event.start_date), date_sort_key(event.end_date), event.title)


def _in_timeline(scene: Scene, timeline_id: Optional[str]) -> bool:
    derived = scene.derived
    if not (derived.start_date or derived.end_date):
        return False
    if timeline_id is None or not derived.timeline_ids:
        return True
    return timeline_id in derived.timeline_ids


async def list_chronological(
    db: StoryDb, user_id: int, series_id: str, timeline_id: Optional[str] = None
) -> List[SceneEventView]:
    await require_series_entry(db, user_id, series_id)
    books = await db.books.list((user_id, series_id))

    events = []
    for book in books:
        for scene in await db.scenes.list((user_id, series_id, book.id)):
            if not _in_timeline(scene, timeline_id):
                continue
            events.append(
                SceneEventView(
                    scene_id=scene.id,
                    book_id=book.id,
                    book_title=book.title,
                    title=scene.derived.title or f"Scene {scene.id[:6]}",
                    start_date=scene.derived.start_date,
                    end_date=scene.derived.end_date,
                )
            )

    events.sort(key=event_sort_key)
    return events
