"""Seed development data: creates the schema and a sample chat between users 42 and 7."""
from __future__ import annotations

import asyncio
import logging

from chat_threads.application.dto.principal import Principal
from chat_threads.config import settings
from chat_threads.infrastructure.db.session import AsyncSessionLocal, create_schema
from chat_threads.infrastructure.db.uow import SqlAlchemyUoW
from chat_threads.logging_config import configure_logging
from chat_threads.services import chat_service

logger = logging.getLogger(__name__)

CONVERSATION = [
    (42, 7, "Hi! Are you coming to the meetup tonight?"),
    (7, 42, "Yes, I'll be there around seven."),
    (42, 7, "Great, see you there"),
]


async def seed() -> None:
    await create_schema()

    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        for sender_id, receiver_id, content in CONVERSATION:
            msg = await chat_service.send(Principal(user_id=sender_id), receiver_id, content, uow)
        logger.info("Seeded chat %s with %d messages", msg.thread_id, len(CONVERSATION))


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
