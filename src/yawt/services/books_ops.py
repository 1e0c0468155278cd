# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Implements books within a series, kept in manual order by rank.

from typing import Dict, List

from yawt.services.common import apply_required_string, optional_id, optional_object
from yawt.services.db import StoryDb
from yawt.services.series_ops import require_series_entry
from yawt.store import KvEntry
from yawt.story.models import AssetImage, Book
from yawt.story.normalize import (
    apply_optional_string,
    normalize_optional_string,
    normalize_required_string,
)


def _scope(user_id: int, series_id: str):
    return (user_id, series_id)


async def require_book_entry(db: StoryDb, user_id: int, series_id: str, book_id: str) -> KvEntry:
    return await db.books.require_entry(_scope(user_id, series_id), book_id)


async def list_books(db: StoryDb, user_id: int, series_id: str) -> List[Book]:
    await require_series_entry(db, user_id, series_id)
    return await db.books.list(_scope(user_id, series_id))


async def create_book(db: StoryDb, user_id: int, series_id: str, payload: dict) -> Book:
    series_entry = await require_series_entry(db, user_id, series_id)
    data = {
        "user_id": user_id,
        "series_id": series_id,
        "title": normalize_required_string(payload.get("title"), "title"),
        "author": normalize_optional_string(payload.get("author")),
        "publish_date": normalize_optional_string(payload.get("publish_date")),
        "isbn": normalize_optional_string(payload.get("isbn")),
        "cover_image": optional_object(payload.get("cover_image"), AssetImage, "cover_image"),
    }
    return await db.books.create(_scope(user_id, series_id), data, parent=series_entry)


async def get_book(db: StoryDb, user_id: int, series_id: str, book_id: str) -> Book:
    return await db.books.require(_scope(user_id, series_id), book_id)


async def update_book(db: StoryDb, user_id: int, series_id: str, book_id: str, payload: dict) -> Book:
    changes: Dict[str, object] = {}
    apply_required_string(changes, payload, "title")
    for key in ("author", "publish_date", "isbn"):
        apply_optional_string(changes, payload, key)
    if "cover_image" in payload:
        changes["cover_image"] = optional_object(payload["cover_image"], AssetImage, "cover_image")
    return await db.books.update(_scope(user_id, series_id), book_id, changes)


async def reorder_book(db: StoryDb, user_id: int, series_id: str, book_id: str, payload: dict) -> Book:
    return await db.books.reorder(
        _scope(user_id, series_id),
        book_id,
        before_item_id=optional_id(payload, "before_book_id"),
        after_item_id=optional_id(payload, "after_book_id"),
    )


async def delete_book(db: StoryDb, user_id: int, series_id: str, book_id: str) -> None:
    """Refused while the book still has scenes."""
    await db.books.delete(
        _scope(user_id, series_id),
        book_id,
        children=(db.scenes, (user_id, series_id, book_id)),
    )
