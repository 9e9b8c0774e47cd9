from __future__ import annotations

from typing import Protocol
from uuid import UUID

from chat_threads.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_messages(
        self,
        thread_id: UUID,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        """Newest first."""
        ...

    async def count_for_thread(self, thread_id: UUID) -> int: ...

    async def latest_for_threads(self, thread_ids: list[UUID]) -> dict[UUID, Message]: ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def delete(self, message_id: UUID) -> Message | None:
        """Delete message and return its prior state, or None if it was already gone."""
        ...

    async def delete_for_thread(self, thread_id: UUID) -> int: ...
