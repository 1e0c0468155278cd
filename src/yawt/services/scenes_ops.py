# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Implements scenes within a book; every text write refreshes the fields derived from frontmatter.

from typing import List

from yawt.core.errors import ValidationError
from yawt.services.books_ops import require_book_entry
from yawt.services.common import optional_id
from yawt.services.db import StoryDb
from yawt.story.frontmatter import derive_scene_fields
from yawt.story.models import Scene, to_record


def _scope(user_id: int, series_id: str, book_id: str):
    return (user_id, series_id, book_id)


async def list_scenes(db: StoryDb, user_id: int, series_id: str, book_id: str) -> List[Scene]:
    await require_book_entry(db, user_id, series_id, book_id)
    return await db.scenes.list(_scope(user_id, series_id, book_id))


async def create_scene(db: StoryDb, user_id: int, series_id: str, book_id: str, payload: dict) -> Scene:
    book_entry = await require_book_entry(db, user_id, series_id, book_id)
    text = payload.get("text")
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("text is required")

    data = {
        "user_id": user_id,
        "series_id": series_id,
        "book_id": book_id,
        "text": text,
        "derived": to_record(derive_scene_fields(text)),
    }
    return await db.scenes.create(_scope(user_id, series_id, book_id), data, parent=book_entry)


async def get_scene(db: StoryDb, user_id: int, series_id: str, book_id: str, scene_id: str) -> Scene:
    return await db.scenes.require(_scope(user_id, series_id, book_id), scene_id)


async def update_scene(
    db: StoryDb, user_id: int, series_id: str, book_id: str, scene_id: str, payload: dict
) -> Scene:
    text = payload.get("text")
    if not isinstance(text, str):
        raise ValidationError("text is required")
    changes = {"text": text, "derived": to_record(derive_scene_fields(text))}
    return await db.scenes.update(_scope(user_id, series_id, book_id), scene_id, changes)


async def reorder_scene(
    db: StoryDb, user_id: int, series_id: str, book_id: str, scene_id: str, payload: dict
) -> Scene:
    return await db.scenes.reorder(
        _scope(user_id, series_id, book_id),
        scene_id,
        before_item_id=optional_id(payload, "before_scene_id"),
        after_item_id=optional_id(payload, "after_scene_id"),
    )


async def delete_scene(db: StoryDb, user_id: int, series_id: str, book_id: str, scene_id: str) -> None:
    await db.scenes.delete(_scope(user_id, series_id, book_id), scene_id)
