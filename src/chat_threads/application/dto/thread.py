from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chat_threads.domain.entities.message import Message
from chat_threads.domain.entities.thread import Thread


@dataclass(frozen=True, slots=True)
class LatestMessagePreview:
    content: str | None = None
    created_at: datetime | None = None

    @classmethod
    def of(cls, message: Message | None) -> LatestMessagePreview:
        if message is None:
            return cls()
        return cls(content=message.content, created_at=message.created_at)


@dataclass(frozen=True, slots=True)
class ThreadSummary:
    """A thread as listed to one of its participants."""

    thread: Thread
    latest_message: LatestMessagePreview
