# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Application entry point.

``create_app`` builds a fresh application around an explicitly constructed
store; tests pass their own in-memory store. ``run`` hands the factory to
uvicorn, which builds the app from YAWT_* environment variables.
"""

from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from yawt import __version__
from yawt.api.auth import router as auth_router
from yawt.api.books import router as books_router
from yawt.api.common import map_api_exception
from yawt.api.events import router as events_router
from yawt.api.scenes import router as scenes_router
from yawt.api.series import router as series_router
from yawt.api.sourcebook import router as sourcebook_router
from yawt.api.timelines import router as timelines_router
from yawt.core.config import Settings, load_settings
from yawt.core.errors import YawtError
from yawt.core.logging_config import setup_logging
from yawt.services.db import StoryDb
from yawt.store import KvStore, open_store

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[KvStore] = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or load_settings()
    if configure_logging:
        setup_logging(settings)
    store = store if store is not None else open_store(settings)

    app = FastAPI(title="YAWT", version=__version__)
    app.state.settings = settings
    app.state.db = StoryDb(store, settings.namespace)

    # Errors raised by dependencies (the session lookup) never reach a route's try block.
    @app.exception_handler(YawtError)
    async def handle_yawt_error(request: Request, exc: YawtError) -> JSONResponse:
        return map_api_exception(exc)

    for router in (
        auth_router,
        series_router,
        books_router,
        scenes_router,
        sourcebook_router,
        timelines_router,
        events_router,
    ):
        app.include_router(router)

    logger.info(
        "YAWT ready (store=%s, namespace=%s)", type(store).__name__, settings.namespace
    )
    return app


def run() -> None:
    settings = load_settings()
    uvicorn.run("yawt.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
