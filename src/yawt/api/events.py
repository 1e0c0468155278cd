# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes series-level events over HTTP.

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yawt.api.common import get_current_user, get_db, map_api_exception, parse_json_body
from yawt.api.http_responses import ok_json
from yawt.services import events_ops
from yawt.services.db import StoryDb
from yawt.story.models import User, to_record

router = APIRouter(prefix="/api/series/{series_id}/events", tags=["Events"])


@router.get("")
async def api_list_events(
    series_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        events = await events_ops.list_events(db, user.id, series_id)
        return ok_json({"events": [to_record(e) for e in events]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("")
async def api_create_event(
    series_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        event = await events_ops.create_event(db, user.id, series_id, payload)
        return ok_json({"event": to_record(event)}, status_code=201)
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/{event_id}")
async def api_get_event(
    series_id: str,
    event_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        event = await events_ops.get_event(db, user.id, series_id, event_id)
        return ok_json({"event": to_record(event)})
    except Exception as exc:
        return map_api_exception(exc)


@router.put("/{event_id}")
async def api_update_event(
    series_id: str,
    event_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        event = await events_ops.update_event(db, user.id, series_id, event_id, payload)
        return ok_json({"event": to_record(event)})
    except Exception as exc:
        return map_api_exception(exc)


@router.delete("/{event_id}")
async def api_delete_event(
    series_id: str,
    event_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await events_ops.delete_event(db, user.id, series_id, event_id)
        return ok_json({"message": "Event deleted"})
    except Exception as exc:
        return map_api_exception(exc)
