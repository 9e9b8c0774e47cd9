from __future__ import annotations

from typing import Protocol

from chat_threads.application.repositories.message import MessageReader, MessageWriter
from chat_threads.application.repositories.outbox import OutboxWriter
from chat_threads.application.repositories.thread import ThreadReader, ThreadWriter


class UnitOfWork(Protocol):
    threads: ThreadReader
    threads_w: ThreadWriter
    messages: MessageReader
    messages_w: MessageWriter
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
