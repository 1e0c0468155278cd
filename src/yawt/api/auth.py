# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes the signed-in user and sign-out; sign-in itself is handled by the external OAuth flow.

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yawt.api.common import get_current_user, get_db, session_id_from
from yawt.api.http_responses import ok_json
from yawt.services.db import StoryDb
from yawt.session import delete_user
from yawt.story.models import User, to_record

router = APIRouter(tags=["Auth"])


@router.get("/api/me")
async def api_me(user: User = Depends(get_current_user)) -> JSONResponse:
    return ok_json({"user": to_record(user)})


@router.get("/auth/signout")
async def auth_signout(request: Request, db: StoryDb = Depends(get_db)) -> JSONResponse:
    session_id = session_id_from(request)
    if session_id:
        await delete_user(db.store, session_id)
    response = ok_json({"message": "Signed out"})
    response.delete_cookie(request.app.state.settings.session_cookie)
    return response
