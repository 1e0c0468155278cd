# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Exposes the store primitives and picks an implementation from settings.

from yawt.core.config import Settings
from yawt.store.kv import (
    AtomicOperation,
    CommitResult,
    JsonFileKvStore,
    KvEntry,
    KvKey,
    KvStore,
)

__all__ = [
    "AtomicOperation",
    "CommitResult",
    "JsonFileKvStore",
    "KvEntry",
    "KvKey",
    "KvStore",
    "open_store",
]


def open_store(settings: Settings) -> KvStore:
    if settings.data_path is not None:
        return JsonFileKvStore(settings.data_path)
    return KvStore()
