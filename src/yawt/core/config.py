# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Resolves runtime settings from the environment so the app factory receives them explicitly.

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_NAMESPACE = "yawt"
DEFAULT_SESSION_COOKIE = "site-session"


@dataclass(frozen=True)
class Settings:
    data_path: Optional[Path] = None
    namespace: str = DEFAULT_NAMESPACE
    session_cookie: str = DEFAULT_SESSION_COOKIE
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    host: str = "127.0.0.1"
    port: int = 8000


def _env_path(name: str) -> Optional[Path]:
    raw = (os.getenv(name) or "").strip()
    return Path(raw).expanduser() if raw else None


def load_settings() -> Settings:
    """Read YAWT_* environment variables, falling back to defaults."""
    port_raw = (os.getenv("YAWT_PORT") or "").strip()
    try:
        port = int(port_raw) if port_raw else 8000
    except ValueError as exc:
        raise ValueError(f"YAWT_PORT must be an integer, got {port_raw!r}") from exc

    return Settings(
        data_path=_env_path("YAWT_DATA_PATH"),
        namespace=(os.getenv("YAWT_NAMESPACE") or "").strip() or DEFAULT_NAMESPACE,
        session_cookie=(os.getenv("YAWT_SESSION_COOKIE") or "").strip()
        or DEFAULT_SESSION_COOKIE,
        log_level=(os.getenv("YAWT_LOG_LEVEL") or "INFO").strip().upper(),
        log_file=_env_path("YAWT_LOG_FILE"),
        host=(os.getenv("YAWT_HOST") or "").strip() or "127.0.0.1",
        port=port,
    )
