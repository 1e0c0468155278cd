# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Key-value store with optimistic multi-key commits.

Keys are tuples of ``str``/``int`` parts compared part by part, strings
sorting before integers. Every committed write stamps the touched keys with a
fresh versionstamp; an atomic operation only applies if each checked key
still carries the versionstamp the caller read (``None`` meaning "absent").
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Tuple, Union

from yawt.core.errors import StorageError

logger = logging.getLogger(__name__)

KvKeyPart = Union[str, int]
KvKey = Tuple[KvKeyPart, ...]


def _part_order(part: KvKeyPart) -> Tuple[int, Any]:
    if isinstance(part, bool):
        raise TypeError("Boolean key parts are not supported")
    if isinstance(part, str):
        return (1, part)
    if isinstance(part, int):
        return (2, part)
    raise TypeError(f"Unsupported key part: {part!r}")


def key_order(key: KvKey) -> Tuple[Tuple[int, Any], ...]:
    return tuple(_part_order(p) for p in key)


def as_key(key: Iterable[KvKeyPart]) -> KvKey:
    result = tuple(key)
    if not result:
        raise ValueError("Key must have at least one part")
    key_order(result)
    return result


@dataclass
class KvEntry:
    key: KvKey
    value: Any
    versionstamp: Optional[str]


@dataclass
class CommitResult:
    ok: bool
    versionstamp: Optional[str] = None


class AtomicOperation:
    """Collects checks and mutations; nothing is applied before ``commit``."""

    def __init__(self, store: "KvStore"):
        self._store = store
        self._checks: List[Tuple[KvKey, Optional[str]]] = []
        self._mutations: List[Tuple[str, KvKey, Any]] = []

    def check(self, key: Iterable[KvKeyPart], versionstamp: Optional[str]) -> "AtomicOperation":
        self._checks.append((as_key(key), versionstamp))
        return self

    def check_entry(self, entry: KvEntry) -> "AtomicOperation":
        return self.check(entry.key, entry.versionstamp)

    def set(self, key: Iterable[KvKeyPart], value: Any) -> "AtomicOperation":
        self._mutations.append(("set", as_key(key), copy.deepcopy(value)))
        return self

    def delete(self, key: Iterable[KvKeyPart]) -> "AtomicOperation":
        self._mutations.append(("delete", as_key(key), None))
        return self

    async def commit(self) -> CommitResult:
        return self._store._commit(self._checks, self._mutations)


class KvStore:
    """In-memory store. Safe to share between the request loop and test code."""

    def __init__(self) -> None:
        self._data: Dict[KvKey, Tuple[Any, str]] = {}
        self._version = 0
        self._lock = threading.Lock()

    async def get(self, key: Iterable[KvKeyPart]) -> KvEntry:
        k = as_key(key)
        with self._lock:
            found = self._data.get(k)
        if found is None:
            return KvEntry(k, None, None)
        return KvEntry(k, copy.deepcopy(found[0]), found[1])

    async def get_many(self, keys: Iterable[Iterable[KvKeyPart]]) -> List[KvEntry]:
        return [await self.get(k) for k in keys]

    async def set(self, key: Iterable[KvKeyPart], value: Any) -> CommitResult:
        return await self.atomic().set(key, value).commit()

    async def delete(self, key: Iterable[KvKeyPart]) -> None:
        await self.atomic().delete(key).commit()

    async def list(
        self,
        prefix: Iterable[KvKeyPart],
        reverse: bool = False,
        limit: Optional[int] = None,
    ) -> AsyncIterator[KvEntry]:
        """Yield entries strictly under ``prefix`` in key order."""
        p = tuple(prefix)
        n = len(p)
        with self._lock:
            matched = [
                (k, copy.deepcopy(v), vs)
                for k, (v, vs) in self._data.items()
                if len(k) > n and k[:n] == p
            ]
        matched.sort(key=lambda item: key_order(item[0]), reverse=reverse)
        if limit is not None:
            matched = matched[:limit]
        for k, v, vs in matched:
            yield KvEntry(k, v, vs)

    def atomic(self) -> AtomicOperation:
        return AtomicOperation(self)

    def _commit(
        self,
        checks: List[Tuple[KvKey, Optional[str]]],
        mutations: List[Tuple[str, KvKey, Any]],
    ) -> CommitResult:
        with self._lock:
            for key, expected in checks:
                current = self._data.get(key)
                current_vs = current[1] if current is not None else None
                if current_vs != expected:
                    logger.debug("Atomic check failed for %s", key)
                    return CommitResult(ok=False)

            self._version += 1
            versionstamp = f"{self._version:020x}"
            undo: Dict[KvKey, Optional[Tuple[Any, str]]] = {}
            for op, key, value in mutations:
                undo.setdefault(key, self._data.get(key))
                if op == "set":
                    self._data[key] = (value, versionstamp)
                else:
                    self._data.pop(key, None)

            try:
                self._after_commit()
            except OSError as exc:
                for key, previous in undo.items():
                    if previous is None:
                        self._data.pop(key, None)
                    else:
                        self._data[key] = previous
                self._version -= 1
                logger.error("Commit rolled back, store could not be saved: %s", exc)
                raise StorageError(f"Failed to save changes: {exc}") from exc
        return CommitResult(ok=True, versionstamp=versionstamp)

    def _after_commit(self) -> None:
        """Hook run under the lock after mutations are applied.

        Raising ``OSError`` here rolls the commit back.
        """


class JsonFileKvStore(KvStore):
    """In-memory store that snapshots itself to a JSON file after each commit."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise RuntimeError(f"Failed to read store file {self.path}: {exc}") from exc

        self._version = int(raw.get("version", 0))
        for key, value, versionstamp in raw.get("entries", []):
            self._data[as_key(key)] = (value, versionstamp)
        logger.info("Loaded %d entries from %s", len(self._data), self.path)

    def _after_commit(self) -> None:
        snapshot = {
            "version": self._version,
            "entries": [[list(k), v, vs] for k, (v, vs) in self._data.items()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(snapshot, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
