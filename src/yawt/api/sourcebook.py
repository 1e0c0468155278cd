# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes the series sourcebook (characters and locations) over HTTP.

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yawt.api.common import get_current_user, get_db, map_api_exception, parse_json_body
from yawt.api.http_responses import ok_json
from yawt.services import sourcebook_ops
from yawt.services.db import StoryDb
from yawt.story.models import User, to_record

router = APIRouter(prefix="/api/series/{series_id}", tags=["Sourcebook"])


@router.get("/characters")
async def api_list_characters(
    series_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        characters = await sourcebook_ops.list_characters(db, user.id, series_id)
        return ok_json({"characters": [to_record(c) for c in characters]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/characters")
async def api_create_character(
    series_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        character = await sourcebook_ops.create_character(db, user.id, series_id, payload)
        return ok_json({"character": to_record(character)}, status_code=201)
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/characters/{character_id}")
async def api_get_character(
    series_id: str,
    character_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        character = await sourcebook_ops.get_character(db, user.id, series_id, character_id)
        return ok_json({"character": to_record(character)})
    except Exception as exc:
        return map_api_exception(exc)


@router.put("/characters/{character_id}")
async def api_update_character(
    series_id: str,
    character_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        character = await sourcebook_ops.update_character(
            db, user.id, series_id, character_id, payload
        )
        return ok_json({"character": to_record(character)})
    except Exception as exc:
        return map_api_exception(exc)


@router.delete("/characters/{character_id}")
async def api_delete_character(
    series_id: str,
    character_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await sourcebook_ops.delete_character(db, user.id, series_id, character_id)
        return ok_json({"message": "Character deleted"})
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/locations")
async def api_list_locations(
    series_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        locations = await sourcebook_ops.list_locations(db, user.id, series_id)
        return ok_json({"locations": [to_record(loc) for loc in locations]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/locations")
async def api_create_location(
    series_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        location = await sourcebook_ops.create_location(db, user.id, series_id, payload)
        return ok_json({"location": to_record(location)}, status_code=201)
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/locations/{location_id}")
async def api_get_location(
    series_id: str,
    location_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        location = await sourcebook_ops.get_location(db, user.id, series_id, location_id)
        return ok_json({"location": to_record(location)})
    except Exception as exc:
        return map_api_exception(exc)


@router.put("/locations/{location_id}")
async def api_update_location(
    series_id: str,
    location_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        location = await sourcebook_ops.update_location(
            db, user.id, series_id, location_id, payload
        )
        return ok_json({"location": to_record(location)})
    except Exception as exc:
        return map_api_exception(exc)


@router.delete("/locations/{location_id}")
async def api_delete_location(
    series_id: str,
    location_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await sourcebook_ops.delete_location(db, user.id, series_id, location_id)
        return ok_json({"message": "Location deleted"})
    except Exception as exc:
        return map_api_exception(exc)
