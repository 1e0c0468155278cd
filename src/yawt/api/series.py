# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes series CRUD over HTTP.

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yawt.api.common import get_current_user, get_db, map_api_exception, parse_json_body
from yawt.api.http_responses import ok_json
from yawt.services import series_ops
from yawt.services.db import StoryDb
from yawt.story.models import User, to_record

router = APIRouter(tags=["Series"])


@router.get("/api/series")
async def api_list_series(
    user: User = Depends(get_current_user), db: StoryDb = Depends(get_db)
) -> JSONResponse:
    try:
        series = await series_ops.list_series(db, user.id)
        return ok_json({"series": [to_record(s) for s in series]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/api/series")
async def api_create_series(
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        series = await series_ops.create_series(db, user.id, payload)
        return ok_json({"series": to_record(series)}, status_code=201)
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/api/series/{series_id}")
async def api_get_series(
    series_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        series = await series_ops.get_series(db, user.id, series_id)
        return ok_json({"series": to_record(series)})
    except Exception as exc:
        return map_api_exception(exc)


@router.put("/api/series/{series_id}")
async def api_update_series(
    series_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        series = await series_ops.update_series(db, user.id, series_id, payload)
        return ok_json({"series": to_record(series)})
    except Exception as exc:
        return map_api_exception(exc)


@router.delete("/api/series/{series_id}")
async def api_delete_series(
    series_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await series_ops.delete_series(db, user.id, series_id)
        return ok_json({"message": "Series deleted"})
    except Exception as exc:
        return map_api_exception(exc)
