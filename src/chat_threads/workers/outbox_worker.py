"""Outbox worker: publishes committed chat events to Redis Pub/Sub."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

import redis.asyncio as aioredis

from chat_threads.application.ports.bus import EventPublisher
from chat_threads.application.uow import UnitOfWork
from chat_threads.config import settings
from chat_threads.infrastructure.bus.redis_pubsub import RedisPubSubPublisher
from chat_threads.infrastructure.db.session import AsyncSessionLocal
from chat_threads.infrastructure.db.uow import SqlAlchemyUoW
from chat_threads.logging_config import configure_logging

logger = logging.getLogger(__name__)

BASE_DELAY_SECONDS = 5
MAX_DELAY_SECONDS = 300


def calc_backoff(attempts: int, now: datetime | None = None) -> datetime:
    delay = min(BASE_DELAY_SECONDS * (2 ** attempts), MAX_DELAY_SECONDS)
    return (now or datetime.now(timezone.utc)) + timedelta(seconds=delay)


async def process_batch(uow: UnitOfWork, publisher: EventPublisher) -> int:
    """Publish one batch of due outbox records. Returns how many were sent."""
    batch = await uow.outbox.fetch_pending(settings.OUTBOX_BATCH_SIZE, settings.OUTBOX_MAX_ATTEMPTS)
    if not batch:
        return 0

    sent_ids: list[int] = []
    for record in batch:
        try:
            await publisher.publish(
                settings.REDIS_PUBSUB_CHANNEL,
                record.event_type,
                record.payload,
                event_id=record.id,
            )
            sent_ids.append(record.id)
        except Exception:
            logger.exception("Failed to publish outbox record %d (attempt %d)", record.id, record.attempts + 1)
            if record.attempts + 1 >= settings.OUTBOX_MAX_ATTEMPTS:
                logger.error("Outbox record %d exceeded max attempts, giving up", record.id)
            await uow.outbox.mark_failed(record.id, calc_backoff(record.attempts))

    await uow.outbox.mark_sent(sent_ids)
    await uow.commit()
    if sent_ids:
        logger.info("Published %d outbox records", len(sent_ids))
    return len(sent_ids)


async def run_outbox_worker() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    publisher = RedisPubSubPublisher(redis)

    logger.info(
        "Outbox worker started (poll=%.1fs, batch=%d, max_attempts=%d)",
        settings.OUTBOX_POLL_INTERVAL,
        settings.OUTBOX_BATCH_SIZE,
        settings.OUTBOX_MAX_ATTEMPTS,
    )

    try:
        while True:
            try:
                async with AsyncSessionLocal() as session, SqlAlchemyUoW(session) as uow:
                    await process_batch(uow, publisher)
            except Exception:
                logger.exception("Outbox worker loop error")
            await asyncio.sleep(settings.OUTBOX_POLL_INTERVAL)
    finally:
        await redis.aclose()


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(run_outbox_worker())


if __name__ == "__main__":
    main()
