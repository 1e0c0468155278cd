# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes books of a series, including manual reordering, over HTTP.

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yawt.api.common import get_current_user, get_db, map_api_exception, parse_json_body
from yawt.api.http_responses import ok_json
from yawt.services import books_ops
from yawt.services.db import StoryDb
from yawt.story.models import User, to_record

router = APIRouter(prefix="/api/series/{series_id}/books", tags=["Books"])


@router.get("")
async def api_list_books(
    series_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        books = await books_ops.list_books(db, user.id, series_id)
        return ok_json({"books": [to_record(b) for b in books]})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("")
async def api_create_book(
    series_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        book = await books_ops.create_book(db, user.id, series_id, payload)
        return ok_json({"book": to_record(book)}, status_code=201)
    except Exception as exc:
        return map_api_exception(exc)


@router.get("/{book_id}")
async def api_get_book(
    series_id: str,
    book_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        book = await books_ops.get_book(db, user.id, series_id, book_id)
        return ok_json({"book": to_record(book)})
    except Exception as exc:
        return map_api_exception(exc)


@router.put("/{book_id}")
async def api_update_book(
    series_id: str,
    book_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        book = await books_ops.update_book(db, user.id, series_id, book_id, payload)
        return ok_json({"book": to_record(book)})
    except Exception as exc:
        return map_api_exception(exc)


@router.post("/{book_id}/reorder")
async def api_reorder_book(
    series_id: str,
    book_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        book = await books_ops.reorder_book(db, user.id, series_id, book_id, payload)
        return ok_json({"book": to_record(book)})
    except Exception as exc:
        return map_api_exception(exc)


@router.delete("/{book_id}")
async def api_delete_book(
    series_id: str,
    book_id: str,
    user: User = Depends(get_current_user),
    db: StoryDb = Depends(get_db),
) -> JSONResponse:
    try:
        await books_ops.delete_book(db, user.id, series_id, book_id)
        return ok_json({"message": "Book deleted"})
    except Exception as exc:
        return map_api_exception(exc)
