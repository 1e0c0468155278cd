# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Implements the series sourcebook: characters and locations with free-form extra attributes.

from typing import Dict, List

from yawt.services.common import apply_required_string, optional_object, optional_object_list
from yawt.services.db import StoryDb
from yawt.services.series_ops import require_series_entry
from yawt.story.models import AssetImage, Character, Coords, Location, LocationLink
from yawt.story.normalize import (
    apply_optional_string,
    apply_optional_string_list,
    normalize_extra,
    normalize_optional_string,
    normalize_optional_string_list,
    normalize_required_string,
)


def _scope(user_id: int, series_id: str):
    return (user_id, series_id)


# Characters


async def list_characters(db: StoryDb, user_id: int, series_id: str) -> List[Character]:
    await require_series_entry(db, user_id, series_id)
    return await db.characters.list(_scope(user_id, series_id))


async def create_character(db: StoryDb, user_id: int, series_id: str, payload: dict) -> Character:
    series_entry = await require_series_entry(db, user_id, series_id)
    data = {
        "user_id": user_id,
        "series_id": series_id,
        "name": normalize_required_string(payload.get("name"), "name"),
        "description": normalize_optional_string(payload.get("description")),
        "image": optional_object(payload.get("image"), AssetImage, "image"),
        "extra": normalize_extra(payload.get("extra")),
    }
    return await db.characters.create(_scope(user_id, series_id), data, parent=series_entry)


async def get_character(db: StoryDb, user_id: int, series_id: str, character_id: str) -> Character:
    return await db.characters.require(_scope(user_id, series_id), character_id)


async def update_character(
    db: StoryDb, user_id: int, series_id: str, character_id: str, payload: dict
) -> Character:
    changes: Dict[str, object] = {}
    apply_required_string(changes, payload, "name")
    apply_optional_string(changes, payload, "description")
    if "image" in payload:
        changes["image"] = optional_object(payload["image"], AssetImage, "image")
    if "extra" in payload:
        changes["extra"] = normalize_extra(payload["extra"])
    return await db.characters.update(_scope(user_id, series_id), character_id, changes)


async def delete_character(db: StoryDb, user_id: int, series_id: str, character_id: str) -> None:
    await db.characters.delete(_scope(user_id, series_id), character_id)


# Locations


async def list_locations(db: StoryDb, user_id: int, series_id: str) -> List[Location]:
    await require_series_entry(db, user_id, series_id)
    return await db.locations.list(_scope(user_id, series_id))


async def create_location(db: StoryDb, user_id: int, series_id: str, payload: dict) -> Location:
    series_entry = await require_series_entry(db, user_id, series_id)
    data = {
        "user_id": user_id,
        "series_id": series_id,
        "name": normalize_required_string(payload.get("name"), "name"),
        "description": normalize_optional_string(payload.get("description")),
        "tags": normalize_optional_string_list(payload.get("tags")),
        "links": optional_object_list(payload.get("links"), LocationLink, "links"),
        "coords": optional_object(payload.get("coords"), Coords, "coords"),
        "extra": normalize_extra(payload.get("extra")),
    }
    return await db.locations.create(_scope(user_id, series_id), data, parent=series_entry)


async def get_location(db: StoryDb, user_id: int, series_id: str, location_id: str) -> Location:
    return await db.locations.require(_scope(user_id, series_id), location_id)


async def update_location(
    db: StoryDb, user_id: int, series_id: str, location_id: str, payload: dict
) -> Location:
    changes: Dict[str, object] = {}
    apply_required_string(changes, payload, "name")
    apply_optional_string(changes, payload, "description")
    apply_optional_string_list(changes, payload, "tags")
    if "links" in payload:
        changes["links"] = optional_object_list(payload["links"], LocationLink, "links")
    if "coords" in payload:
        changes["coords"] = optional_object(payload["coords"], Coords, "coords")
    if "extra" in payload:
        changes["extra"] = normalize_extra(payload["extra"])
    return await db.locations.update(_scope(user_id, series_id), location_id, changes)


async def delete_location(db: StoryDb, user_id: int, series_id: str, location_id: str) -> None:
    await db.locations.delete(_scope(user_id, series_id), location_id)
