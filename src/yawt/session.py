# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Maps session ids to signed-in users; the OAuth flow that creates sessions lives outside this package.

from typing import Optional

from yawt.store import KvStore
from yawt.story.keys import session_key
from yawt.story.models import User, to_record


async def get_user(store: KvStore, session_id: Optional[str]) -> Optional[User]:
    if not session_id:
        return None
    entry = await store.get(session_key(session_id))
    return User(**entry.value) if entry.value is not None else None


async def set_user(store: KvStore, session_id: str, user: User) -> None:
    await store.set(session_key(session_id), to_record(user))


async def delete_user(store: KvStore, session_id: str) -> None:
    await store.delete(session_key(session_id))
