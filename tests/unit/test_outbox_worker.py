from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from chat_threads.application.repositories.outbox import OutboxRecord
from chat_threads.config import settings
from chat_threads.infrastructure.bus.serializer import serialize_event
from chat_threads.workers import outbox_worker
from tests.conftest import FakeUoW


class RecordingPublisher:
    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.published: list[tuple[str, str, dict, int | None]] = []
        self._fail_on = fail_on or set()

    async def publish(self, channel, event_type, payload, *, event_id=None):
        if event_id in self._fail_on:
            raise ConnectionError("redis unavailable")
        self.published.append((channel, event_type, payload, event_id))


@pytest.mark.asyncio
async def test_process_batch_publishes_and_marks_sent():
    uow = FakeUoW()
    uow.outbox._pending = [
        OutboxRecord(id=1, event_type="chat.message_sent", payload={"message_id": "m1"}, attempts=0),
        OutboxRecord(id=2, event_type="chat.thread_deleted", payload={"thread_id": "t1"}, attempts=1),
    ]
    publisher = RecordingPublisher()

    sent = await outbox_worker.process_batch(uow, publisher)

    assert sent == 2
    assert uow.outbox._sent == [1, 2]
    assert [p[1] for p in publisher.published] == ["chat.message_sent", "chat.thread_deleted"]
    assert all(p[0] == settings.REDIS_PUBSUB_CHANNEL for p in publisher.published)
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_process_batch_schedules_retry_on_failure():
    uow = FakeUoW()
    uow.outbox._pending = [
        OutboxRecord(id=1, event_type="chat.message_sent", payload={}, attempts=0),
        OutboxRecord(id=2, event_type="chat.message_sent", payload={}, attempts=2),
    ]
    before = datetime.now(timezone.utc)

    sent = await outbox_worker.process_batch(uow, RecordingPublisher(fail_on={2}))

    assert sent == 1
    assert uow.outbox._sent == [1]
    assert uow.outbox._failed[2] >= before + timedelta(seconds=20)


@pytest.mark.asyncio
async def test_process_batch_idle():
    uow = FakeUoW()

    assert await outbox_worker.process_batch(uow, RecordingPublisher()) == 0
    assert uow.commits == 0


def test_backoff_is_capped():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    assert outbox_worker.calc_backoff(0, now) == now + timedelta(seconds=5)
    assert outbox_worker.calc_backoff(3, now) == now + timedelta(seconds=40)
    assert outbox_worker.calc_backoff(10, now) == now + timedelta(seconds=outbox_worker.MAX_DELAY_SECONDS)


def test_serialize_event_envelope():
    ts = datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)

    raw = serialize_event("chat.message_sent", {"content": "привет", "at": ts}, event_id=7)

    assert json.loads(raw) == {
        "event": "chat.message_sent",
        "id": 7,
        "data": {"content": "привет", "at": ts.isoformat()},
    }
