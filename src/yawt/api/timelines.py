# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes timelines and the chronological scene views over HTTP.

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yawt.api.common import get_current_user, get_db, map_api_exception, parse_json_body
from yawt.api.http_responses import ok_json
from yawt.services import timelines_ops
from yawt.services.chronology import list_chronological
from yawt.services.db import StoryDb
from yawt.story.models import User, to_record

router = APIRouter(prefix="/api/series/{series_id}", tags=["Timelines"])


@router.get("/timelines")
async def api_list_timelines(
    series_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        timelines = await timelines_ops.list_timelines(db, user.id, series_id)
        return ok_json({"timelines": [to_record(t) for t in timelines]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/timelines")
async def api_create_timeline(
    series_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        timeline = await timelines_ops.create_timeline(db, user.id, series_id, payload)
        return ok_json({"timeline": to_record(timeline)}, status_code=201)
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/timelines/{timeline_id}")
async def api_get_timeline(
    series_id: str,
    timeline_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        timeline = await timelines_ops.get_timeline(db, user.id, series_id, timeline_id)
        return ok_json({"timeline": to_record(timeline)})
    except Exception as exc:
        return map_api_exception(exc)


@router.put("/timelines/{timeline_id}")
async def api_update_timeline(
    series_id: str,
    timeline_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        timeline = await timelines_ops.update_timeline(db, user.id, series_id, timeline_id, payload)
        return ok_json({"timeline": to_record(timeline)})
    except Exception as exc:
        return map_api_exception(exc)


@router.delete("/timelines/{timeline_id}")
async def api_delete_timeline(
    series_id: str,
    timeline_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await timelines_ops.delete_timeline(db, user.id, series_id, timeline_id)
        return ok_json({"message": "Timeline deleted"})
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/timelines/{timeline_id}/events")
async def api_list_timeline_events(
    series_id: str,
    timeline_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        events = await timelines_ops.list_timeline_events(db, user.id, series_id, timeline_id)
        return ok_json({"events": [to_record(e) for e in events]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/timelines/{timeline_id}/events")
async def api_create_timeline_event(
    series_id: str,
    timeline_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await timelines_ops.create_timeline_event(db, user.id, series_id, timeline_id)
        return ok_json()
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/timelines/{timeline_id}/events/{event_id}/reorder")
async def api_reorder_timeline_event(
    series_id: str,
    timeline_id: str,
    event_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await timelines_ops.reorder_timeline_event(db, user.id, series_id, timeline_id)
        return ok_json()
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/chronology")
async def api_chronology(
    series_id: str,
    timeline_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        events = await list_chronological(db, user.id, series_id, timeline_id or None)
        return ok_json({"events": [to_record(e) for e in events]})
    except Exception as exc:
        return map_api_exception(exc)
