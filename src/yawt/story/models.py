# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Declares the persisted record shapes so storage and API serialization stay deterministic.

import time
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, JsonValue

UserId = int


def now_ms() -> int:
    return int(time.time() * 1000)


class AssetImage(BaseModel):
    object_key: str
    url: Optional[str] = None
    content_type: Optional[str] = None


class User(BaseModel):
    id: UserId
    login: str
    avatar_url: str = ""
    name: Optional[str] = None
    email: Optional[str] = None


class Series(BaseModel):
    id: str
    user_id: UserId
    title: str
    description: Optional[str] = None
    assets: Optional[List[AssetImage]] = None
    created_at: int
    updated_at: int


class Book(BaseModel):
    id: str
    user_id: UserId
    series_id: str
    rank: str
    title: str
    author: Optional[str] = None
    publish_date: Optional[str] = None
    isbn: Optional[str] = None
    cover_image: Optional[AssetImage] = None
    created_at: int
    updated_at: int


class SceneDerived(BaseModel):
    """Fields read from a scene's YAML frontmatter. Recomputed on every text write."""

    title: Optional[str] = None
    chapter: Optional[Union[int, float, str]] = None
    section: Optional[str] = None
    timeline_ids: Optional[List[str]] = None
    location_id: Optional[str] = None
    character_ids: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class Scene(BaseModel):
    id: str
    user_id: UserId
    series_id: str
    book_id: str
    rank: str
    text: str
    derived: SceneDerived = Field(default_factory=SceneDerived)
    created_at: int
    updated_at: int


class Character(BaseModel):
    id: str
    user_id: UserId
    series_id: str
    name: str
    description: Optional[str] = None
    image: Optional[AssetImage] = None
    extra: Optional[Dict[str, JsonValue]] = None
    created_at: int
    updated_at: int


class LocationLink(BaseModel):
    location_id: str
    kind: Optional[str] = None


class Coords(BaseModel):
    x: Optional[float] = None
    y: Optional[float] = None


class Location(BaseModel):
    id: str
    user_id: UserId
    series_id: str
    name: str
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    links: Optional[List[LocationLink]] = None
    coords: Optional[Coords] = None
    extra: Optional[Dict[str, JsonValue]] = None
    created_at: int
    updated_at: int


class Timeline(BaseModel):
    id: str
    user_id: UserId
    series_id: str
    title: str
    description: Optional[str] = None
    created_at: int
    updated_at: int


class Event(BaseModel):
    id: str
    user_id: UserId
    series_id: str
    title: str
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    location_id: Optional[str] = None
    character_ids: Optional[List[str]] = None
    scene_ids: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    created_at: int
    updated_at: int


class SceneEventView(BaseModel):
    scene_id: str
    book_id: str
    book_title: Optional[str] = None
    title: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None


def to_record(model: BaseModel) -> dict:
    """Serialize for storage and responses; absent optional fields are omitted."""
    return model.model_dump(mode="json", exclude_none=True)
