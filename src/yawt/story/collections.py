# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Record and ordered-record collections on top of the KV store.

An ``OrderedCollection`` writes two keys per item: the record itself and an
order-index marker whose key embeds the item's rank. Listing scans the
order index (which the store returns in rank order) and then fetches the
records. Every mutation touching both keys goes through one atomic commit,
so the set of ids in the index always equals the set of stored records.

Rank issuance in a scope also rewrites that scope's order guard key and
checks its versionstamp, so two concurrent creates or reorders in the same
scope cannot both commit with ranks computed from the same snapshot.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from yawt.core.config import DEFAULT_NAMESPACE
from yawt.core.errors import (
    ConflictError,
    NotEmptyError,
    NotFoundError,
    ValidationError,
)
from yawt.store import AtomicOperation, KvEntry, KvStore
from yawt.story import keys, rank
from yawt.story.models import now_ms, to_record

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

Scope = keys.Scope
# Fields owned by the collection; callers cannot set them through ``update``.
_MANAGED_FIELDS = ("id", "rank", "created_at", "updated_at")


class RecordCollection(Generic[M]):
    def __init__(
        self,
        store: KvStore,
        entity: str,
        model: Type[M],
        label: str,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.store = store
        self.entity = entity
        self.model = model
        self.label = label
        self.namespace = namespace

    def key(self, scope: Scope, item_id: str):
        return keys.record_key(self.entity, scope, item_id, self.namespace)

    def _build(self, record: Dict[str, Any]) -> M:
        try:
            return self.model(**record)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid {self.label.lower()}: {exc}") from exc

    async def get_entry(self, scope: Scope, item_id: str) -> KvEntry:
        return await self.store.get(self.key(scope, item_id))

    async def require_entry(self, scope: Scope, item_id: str) -> KvEntry:
        entry = await self.get_entry(scope, item_id)
        if entry.value is None:
            raise NotFoundError(f"{self.label} not found")
        return entry

    async def get(self, scope: Scope, item_id: str) -> Optional[M]:
        entry = await self.get_entry(scope, item_id)
        return self.model(**entry.value) if entry.value is not None else None

    async def require(self, scope: Scope, item_id: str) -> M:
        entry = await self.require_entry(scope, item_id)
        return self.model(**entry.value)

    async def list(self, scope: Scope) -> List[M]:
        prefix = keys.record_prefix(self.entity, scope, self.namespace)
        return [self.model(**entry.value) async for entry in self.store.list(prefix)]

    async def _commit(self, op: AtomicOperation, action: str) -> None:
        result = await op.commit()
        if not result.ok:
            logger.warning("Commit conflict while trying to %s %s", action, self.label.lower())
            raise ConflictError(f"Failed to {action} {self.label.lower()}")

    async def create(
        self,
        scope: Scope,
        data: Dict[str, Any],
        parent: Optional[KvEntry] = None,
        item_id: Optional[str] = None,
    ) -> M:
        item_id = item_id or str(uuid.uuid4())
        now = now_ms()
        item = self._build({**data, "id": item_id, "created_at": now, "updated_at": now})
        key = self.key(scope, item_id)

        op = self.store.atomic().check(key, None).set(key, to_record(item))
        if parent is not None:
            op.check_entry(parent)
        await self._commit(op, "create")
        return item

    async def update(self, scope: Scope, item_id: str, changes: Dict[str, Any]) -> M:
        """Apply field changes. A ``None`` value removes the field."""
        entry = await self.require_entry(scope, item_id)
        record = dict(entry.value)
        for name, value in changes.items():
            if name in _MANAGED_FIELDS:
                continue
            if value is None:
                record.pop(name, None)
            else:
                record[name] = value
        record["updated_at"] = now_ms()
        item = self._build(record)

        op = self.store.atomic().check_entry(entry).set(entry.key, to_record(item))
        await self._commit(op, "update")
        return item

    async def delete(
        self,
        scope: Scope,
        item_id: str,
        children: Optional[Tuple["OrderedCollection", Scope]] = None,
    ) -> None:
        """Delete one record; refuse while ``children`` still has any entry."""
        entry = await self.require_entry(scope, item_id)
        op = self.store.atomic().check_entry(entry).delete(entry.key)

        if children is not None:
            child, child_scope = children
            guard = await self.store.get(child.guard_key(child_scope))
            if await child.has_items(child_scope):
                logger.info("Refusing to delete non-empty %s %s", self.label.lower(), item_id)
                raise NotEmptyError(
                    f"{self.label} is not empty. Delete {child.label.lower()}s first."
                )
            op.check_entry(guard)

        self._on_delete(op, scope, entry)
        await self._commit(op, "delete")

    def _on_delete(self, op: AtomicOperation, scope: Scope, entry: KvEntry) -> None:
        pass


class OrderedCollection(RecordCollection[M]):
    """Records that keep a manual order within their parent scope."""

    def order_prefix(self, scope: Scope):
        return keys.order_prefix(self.entity, scope, self.namespace)

    def order_key(self, scope: Scope, item_rank: str, item_id: str):
        return keys.order_key(self.entity, scope, item_rank, item_id, self.namespace)

    def guard_key(self, scope: Scope):
        return keys.order_guard_key(self.entity, scope, self.namespace)

    async def order_entries(self, scope: Scope) -> List[Tuple[str, str]]:
        """Return ``(rank, item_id)`` pairs in rank order."""
        return [
            (entry.key[-2], entry.key[-1])
            async for entry in self.store.list(self.order_prefix(scope))
        ]

    async def has_items(self, scope: Scope) -> bool:
        async for _ in self.store.list(self.order_prefix(scope), limit=1):
            return True
        return False

    async def last_rank(self, scope: Scope) -> Optional[str]:
        async for entry in self.store.list(self.order_prefix(scope), reverse=True, limit=1):
            return entry.key[-2]
        return None

    async def list(self, scope: Scope) -> List[M]:
        ids = [item_id for _, item_id in await self.order_entries(scope)]
        if not ids:
            return []
        entries = await self.store.get_many(self.key(scope, i) for i in ids)
        items = []
        for item_id, entry in zip(ids, entries):
            if entry.value is None:
                logger.warning(
                    "Order index for %s scope %s points at missing record %s",
                    self.label.lower(),
                    scope,
                    item_id,
                )
                continue
            items.append(self.model(**entry.value))
        return items

    async def create(
        self,
        scope: Scope,
        data: Dict[str, Any],
        parent: Optional[KvEntry] = None,
        item_id: Optional[str] = None,
    ) -> M:
        item_id = item_id or str(uuid.uuid4())
        guard = await self.store.get(self.guard_key(scope))
        last = await self.last_rank(scope)
        item_rank = rank.after(last) if last is not None else rank.initial()

        now = now_ms()
        item = self._build(
            {**data, "id": item_id, "rank": item_rank, "created_at": now, "updated_at": now}
        )
        key = self.key(scope, item_id)

        op = (
            self.store.atomic()
            .check(key, None)
            .check_entry(guard)
            .set(key, to_record(item))
            .set(self.order_key(scope, item_rank, item_id), 1)
            .set(guard.key, item_rank)
        )
        if parent is not None:
            op.check_entry(parent)
        await self._commit(op, "create")
        return item

    async def reorder(
        self,
        scope: Scope,
        item_id: str,
        before_item_id: Optional[str] = None,
        after_item_id: Optional[str] = None,
    ) -> M:
        """Move an item next to a reference item.

        ``after_item_id`` supplies the lower bound and ``before_item_id`` the
        upper one. With a single reference the other bound is that
        reference's current neighbour, so the item lands directly beside it.
        With both, they must be neighbours once the moved item is set aside.
        """
        if not before_item_id and not after_item_id:
            raise ValidationError("before_item_id or after_item_id is required")
        if before_item_id and before_item_id == item_id:
            raise ValidationError("before_item_id cannot be the same as the moved item")
        if after_item_id and after_item_id == item_id:
            raise ValidationError("after_item_id cannot be the same as the moved item")

        entry = await self.require_entry(scope, item_id)
        before_entry = after_entry = None
        if before_item_id:
            before_entry = await self.get_entry(scope, before_item_id)
            if before_entry.value is None:
                raise NotFoundError("before_item_id not found")
        if after_item_id:
            after_entry = await self.get_entry(scope, after_item_id)
            if after_entry.value is None:
                raise NotFoundError("after_item_id not found")

        guard = await self.store.get(self.guard_key(scope))
        lower = after_entry.value["rank"] if after_entry is not None else None
        upper = before_entry.value["rank"] if before_entry is not None else None

        others = [e for e in await self.order_entries(scope) if e[1] != item_id]
        if before_entry is not None and after_entry is not None:
            # Anything already between the two references could share the new rank.
            positions = {i: n for n, (_, i) in enumerate(others)}
            lower_at = positions.get(after_item_id)
            upper_at = positions.get(before_item_id)
            if lower_at is None or upper_at != lower_at + 1:
                raise ValidationError(
                    "after_item_id and before_item_id must be adjacent, in that order"
                )
        elif after_entry is None:
            anchor = (upper, before_item_id)
            preceding = [r for r, i in others if (r, i) < anchor]
            lower = preceding[-1] if preceding else None
        else:
            anchor = (lower, after_item_id)
            following = [r for r, i in others if (r, i) > anchor]
            upper = following[0] if following else None

        new_rank = rank.between(lower, upper)
        old = entry.value
        record = {**old, "rank": new_rank, "updated_at": now_ms()}
        item = self._build(record)

        op = (
            self.store.atomic()
            .check_entry(entry)
            .check_entry(guard)
            .delete(self.order_key(scope, old["rank"], item_id))
            .set(entry.key, to_record(item))
            .set(self.order_key(scope, new_rank, item_id), 1)
            .set(guard.key, new_rank)
        )
        for ref in (before_entry, after_entry):
            if ref is not None:
                op.check_entry(ref)
        await self._commit(op, "reorder")
        return item

    def _on_delete(self, op: AtomicOperation, scope: Scope, entry: KvEntry) -> None:
        op.delete(self.order_key(scope, entry.value["rank"], entry.value["id"]))
