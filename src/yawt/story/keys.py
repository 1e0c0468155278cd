# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Store key layout.

Records:      (namespace, entity, user_id, *scope_ids, entity_id)
Order index:  (namespace, entity + "Order", user_id, *scope_ids, rank, entity_id)
Order guard:  (namespace, entity + "OrderGuard", user_id, *scope_ids)

The user id is always the third part, so one user's keys never share a
prefix with another's.
"""

from typing import Tuple

from yawt.core.config import DEFAULT_NAMESPACE
from yawt.store import KvKey

Scope = Tuple[object, ...]

SERIES = "series"
BOOK = "book"
SCENE = "scene"
CHARACTER = "character"
LOCATION = "location"
TIMELINE = "timeline"
EVENT = "event"


def record_prefix(entity: str, scope: Scope, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return (namespace, entity, *scope)


def record_key(entity: str, scope: Scope, item_id: str, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return (namespace, entity, *scope, item_id)


def order_prefix(entity: str, scope: Scope, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return (namespace, entity + "Order", *scope)


def order_key(entity: str, scope: Scope, rank: str, item_id: str, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return (namespace, entity + "Order", *scope, rank, item_id)


def order_guard_key(entity: str, scope: Scope, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return (namespace, entity + "OrderGuard", *scope)


def series_key(user_id: int, series_id: str, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return record_key(SERIES, (user_id,), series_id, namespace)


def book_key(user_id: int, series_id: str, book_id: str, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return record_key(BOOK, (user_id, series_id), book_id, namespace)


def book_order_key(user_id: int, series_id: str, rank: str, book_id: str, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return order_key(BOOK, (user_id, series_id), rank, book_id, namespace)


def scene_key(user_id: int, series_id: str, book_id: str, scene_id: str, namespace: str = DEFAULT_NAMESPACE) -> KvKey:
    return record_key(SCENE, (user_id, series_id, book_id), scene_id, namespace)


def scene_order_key(
    user_id: int, series_id: str, book_id: str, rank: str, scene_id: str, namespace: str = DEFAULT_NAMESPACE
) -> KvKey:
    return order_key(SCENE, (user_id, series_id, book_id), rank, scene_id, namespace)


def session_key(session_id: str) -> KvKey:
    return ("users", session_id)
