from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from chat_threads.domain.entities.thread import Thread


class ThreadReader(Protocol):
    async def get_by_id(self, thread_id: UUID) -> Thread | None: ...

    async def get_active_for_pair(self, user_a: int, user_b: int) -> Thread | None:
        """Find the non-deleted thread whose participants are exactly {user_a, user_b}."""
        ...

    async def list_for_user(
        self, user_id: int, *, offset: int = 0, limit: int = 20
    ) -> list[Thread]: ...


class ThreadWriter(Protocol):
    async def create(self, thread: Thread) -> Thread:
        """Insert thread. Raise ConflictError if the pair already has an active thread."""
        ...

    async def mark_deleted(self, thread_id: UUID) -> None: ...

    async def delete(self, thread_id: UUID) -> None: ...

    async def touch_latest_activity(self, thread_id: UUID, ts: datetime) -> None:
        """Move latest_activity_at forward to ts; never moves it backwards."""
        ...

    async def recompute_latest_activity(self, thread_id: UUID) -> None: ...
