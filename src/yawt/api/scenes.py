# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes scenes of a book, including text edits and manual reordering, over HTTP.

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yawt.api.common import get_current_user, get_db, map_api_exception, parse_json_body
from yawt.api.http_responses import ok_json
from yawt.services import scenes_ops
from yawt.services.db import StoryDb
from yawt.story.models import User, to_record

router = APIRouter(prefix="/api/series/{series_id}/books/{book_id}/scenes", tags=["Scenes"])


@router.get("")
async def api_list_scenes(
    series_id: str,
    book_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        scenes = await scenes_ops.list_scenes(db, user.id, series_id, book_id)
        return ok_json({"scenes": [to_record(s) for s in scenes]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("")
async def api_create_scene(
    series_id: str,
    book_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        scene = await scenes_ops.create_scene(db, user.id, series_id, book_id, payload)
        return ok_json({"scene": to_record(scene)}, status_code=201)
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/{scene_id}")
async def api_get_scene(
    series_id: str,
    book_id: str,
    scene_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        scene = await scenes_ops.get_scene(db, user.id, series_id, book_id, scene_id)
        return ok_json({"scene": to_record(scene)})
    except Exception as exc:
        return map_api_exception(exc)


@router.put("/{scene_id}")
async def api_update_scene(
    series_id: str,
    book_id: str,
    scene_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        scene = await scenes_ops.update_scene(db, user.id, series_id, book_id, scene_id, payload)
        return ok_json({"scene": to_record(scene)})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/{scene_id}/reorder")
async def api_reorder_scene(
    series_id: str,
    book_id: str,
    scene_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        scene = await scenes_ops.reorder_scene(db, user.id, series_id, book_id, scene_id, payload)
        return ok_json({"scene": to_record(scene)})
    except Exception as exc:
        return map_api_exception(exc)


@router.delete("/{scene_id}")
async def api_delete_scene(
    series_id: str,
    book_id: str,
    scene_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await scenes_ops.delete_scene(db, user.id, series_id, book_id, scene_id)
        return ok_json({"message": "Scene deleted"})
    except Exception as exc:
        return map_api_exception(exc)
