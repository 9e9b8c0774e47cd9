"""Shared test fixtures."""
from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import pytest

from chat_threads.application.dto.principal import Principal
from chat_threads.application.exceptions import ConflictError
from chat_threads.application.repositories.outbox import OutboxRecord
from chat_threads.domain.entities.message import Message
from chat_threads.domain.entities.thread import Thread, ordered_pair
from chat_threads.domain.value_objects.enums import ThreadKind

ALICE = 42
BOB = 7
MALLORY = 999


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id=ALICE)


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id=BOB)


@pytest.fixture
def mallory() -> Principal:
    return Principal(user_id=MALLORY)


def make_thread(
    *,
    user_a: int = ALICE,
    user_b: int = BOB,
    thread_id: UUID | None = None,
    latest_activity_at: datetime | None = None,
    is_deleted: bool = False,
    created_at: datetime | None = None,
) -> Thread:
    low, high = ordered_pair(user_a, user_b)
    now = created_at or datetime.now(timezone.utc)
    return Thread(
        id=thread_id or uuid.uuid4(),
        kind=ThreadKind.PRIVATE,
        member_low_id=low,
        member_high_id=high,
        latest_activity_at=latest_activity_at,
        is_deleted=is_deleted,
        created_at=now,
        updated_at=now,
    )


def make_message(
    *,
    thread_id: UUID,
    author_id: int = ALICE,
    content: str = "hello",
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        thread_id=thread_id,
        author_id=author_id,
        content=content,
        created_at=created_at or datetime.now(timezone.utc),
    )


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def get_by_id(self, message_id: UUID) -> Message | None:
        return next((m for m in self._messages if m.id == message_id), None)

    async def list_messages(self, thread_id: UUID, *, offset: int = 0, limit: int = 50) -> list[Message]:
        # Insertion order breaks created_at ties, newest first.
        ordered = sorted(
            ((m.created_at, i, m) for i, m in enumerate(self._messages) if m.thread_id == thread_id),
            key=lambda row: (row[0], row[1]),
            reverse=True,
        )
        return [m for _, _, m in ordered][offset:offset + limit]

    async def count_for_thread(self, thread_id: UUID) -> int:
        return sum(1 for m in self._messages if m.thread_id == thread_id)

    async def latest_for_threads(self, thread_ids: list[UUID]) -> dict[UUID, Message]:
        latest: dict[UUID, Message] = {}
        for m in self._messages:
            if m.thread_id not in thread_ids:
                continue
            current = latest.get(m.thread_id)
            if current is None or m.created_at >= current.created_at:
                latest[m.thread_id] = m
        return latest


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    _log: list[str] = field(default_factory=list)

    async def create(self, message: Message) -> Message:
        self._reader._messages.append(message)
        return message

    async def delete(self, message_id: UUID) -> Message | None:
        for m in self._reader._messages:
            if m.id == message_id:
                self._reader._messages.remove(m)
                return m
        return None

    async def delete_for_thread(self, thread_id: UUID) -> int:
        self._log.append("delete_for_thread")
        before = len(self._reader._messages)
        self._reader._messages[:] = [m for m in self._reader._messages if m.thread_id != thread_id]
        return before - len(self._reader._messages)


def _activity_key(thread: Thread) -> tuple[bool, datetime, datetime]:
    return (
        thread.latest_activity_at is not None,
        thread.latest_activity_at or thread.created_at,
        thread.created_at,
    )


@dataclass
class FakeThreadReader:
    _store: dict[UUID, Thread] = field(default_factory=dict)

    async def get_by_id(self, thread_id: UUID) -> Thread | None:
        return self._store.get(thread_id)

    async def get_active_for_pair(self, user_a: int, user_b: int) -> Thread | None:
        pair = ordered_pair(user_a, user_b)
        for t in self._store.values():
            if t.participants == pair and not t.is_deleted:
                return t
        return None

    async def list_for_user(self, user_id: int, *, offset: int = 0, limit: int = 20) -> list[Thread]:
        mine = [t for t in self._store.values() if t.has_participant(user_id) and not t.is_deleted]
        return sorted(mine, key=_activity_key, reverse=True)[offset:offset + limit]


@dataclass
class FakeThreadWriter:
    _reader: FakeThreadReader
    _messages: FakeMessageReader
    _log: list[str] = field(default_factory=list)

    def _replace(self, thread_id: UUID, **changes: Any) -> None:
        thread = self._reader._store.get(thread_id)
        if thread is not None:
            self._reader._store[thread_id] = dataclasses.replace(thread, **changes)

    async def create(self, thread: Thread) -> Thread:
        # Mirrors the partial unique index on the pair of non-deleted threads.
        for existing in self._reader._store.values():
            if existing.participants == thread.participants and not existing.is_deleted:
                raise ConflictError("A chat between these users already exists")
        self._reader._store[thread.id] = thread
        return thread

    async def mark_deleted(self, thread_id: UUID) -> None:
        self._log.append("mark_deleted")
        self._replace(thread_id, is_deleted=True)

    async def delete(self, thread_id: UUID) -> None:
        self._reader._store.pop(thread_id, None)

    async def touch_latest_activity(self, thread_id: UUID, ts: datetime) -> None:
        thread = self._reader._store.get(thread_id)
        if thread is not None and (thread.latest_activity_at is None or thread.latest_activity_at < ts):
            self._replace(thread_id, latest_activity_at=ts)

    async def recompute_latest_activity(self, thread_id: UUID) -> None:
        stamps = [m.created_at for m in self._messages._messages if m.thread_id == thread_id]
        self._replace(thread_id, latest_activity_at=max(stamps) if stamps else None)


@dataclass
class FakeOutboxWriter:
    _records: list[dict[str, Any]] = field(default_factory=list)
    _pending: list[OutboxRecord] = field(default_factory=list)
    _sent: list[int] = field(default_factory=list)
    _failed: dict[int, datetime] = field(default_factory=dict)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._records.append({"event_type": event_type, "payload": payload})

    async def fetch_pending(self, batch_size: int, max_attempts: int) -> list[OutboxRecord]:
        return [r for r in self._pending if r.attempts < max_attempts][:batch_size]

    async def mark_sent(self, ids: list[int]) -> None:
        self._sent.extend(ids)

    async def mark_failed(self, record_id: int, next_retry_at: datetime) -> None:
        self._failed[record_id] = next_retry_at

    def event_types(self) -> list[str]:
        return [r["event_type"] for r in self._records]


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    threads: FakeThreadReader = field(default_factory=FakeThreadReader)
    threads_w: FakeThreadWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    outbox: FakeOutboxWriter = field(default_factory=FakeOutboxWriter)
    commits: int = 0
    rollbacks: int = 0
    ops: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.threads_w is None:
            self.threads_w = FakeThreadWriter(self.threads, self.messages, self.ops)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages, self.ops)

    def add_thread(self, thread: Thread) -> Thread:
        self.threads._store[thread.id] = thread
        return thread

    def add_message(self, message: Message) -> Message:
        self.messages._messages.append(message)
        return message

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self.commits += 1
        self.ops.append("commit")

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.ops.append("rollback")


def seconds_ago(seconds: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(seconds=seconds)
