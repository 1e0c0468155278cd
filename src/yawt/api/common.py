from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from yawt.api.http_responses import error_json
from yawt.core.errors import UnauthorizedError, ValidationError, YawtError
from yawt.services.db import StoryDb
from yawt.session import get_user
from yawt.story.models import User

logger = logging.getLogger(__name__)


async def parse_json_body(request: Request) -> dict:
    try:
        payload = await request.json()
    except Exception as exc:
        raise ValidationError("Invalid JSON in request body") from exc
    return payload if isinstance(payload, dict) else {}


def get_db(request: Request) -> StoryDb:
    return request.app.state.db


def session_id_from(request: Request) -> str | None:
    return request.cookies.get(request.app.state.settings.session_cookie)


async def get_current_user(request: Request) -> User:
    db = get_db(request)
    user = await get_user(db.store, session_id_from(request))
    if user is None:
        raise UnauthorizedError()
    return user


def map_api_exception(exc: Exception) -> JSONResponse:
    if isinstance(exc, YawtError):
        return error_json(exc.detail, exc.status_code)
    if isinstance(exc, HTTPException):
        return error_json(str(exc.detail), exc.status_code)
    logger.exception("Unhandled error while serving request")
    return error_json(str(exc), 500)
