"""Thread directory: maps a pair of users to their private chat thread."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from chat_threads.application.dto.thread import LatestMessagePreview, ThreadSummary
from chat_threads.application.exceptions import ConflictError, ValidationError
from chat_threads.application.policies.permissions import assert_thread_access
from chat_threads.application.repositories.outbox import THREAD_CREATED, THREAD_DELETED
from chat_threads.application.uow import UnitOfWork
from chat_threads.domain.entities.thread import Thread, ordered_pair
from chat_threads.domain.value_objects.enums import ThreadKind

logger = logging.getLogger(__name__)


async def resolve_or_create(
    user_a: int,
    user_b: int,
    uow: UnitOfWork,
) -> Thread:
    """Return the active thread between two users, creating it on first contact."""
    if user_a == user_b:
        raise ValidationError("Cannot start a chat with yourself")

    existing = await uow.threads.get_active_for_pair(user_a, user_b)
    if existing is not None:
        return existing

    low, high = ordered_pair(user_a, user_b)
    now = datetime.now(timezone.utc)
    thread = Thread(
        id=uuid.uuid4(),
        kind=ThreadKind.PRIVATE,
        member_low_id=low,
        member_high_id=high,
        latest_activity_at=None,
        is_deleted=False,
        created_at=now,
        updated_at=now,
    )
    try:
        thread = await uow.threads_w.create(thread)
    except ConflictError:
        # Another request created the thread between our lookup and insert.
        existing = await uow.threads.get_active_for_pair(user_a, user_b)
        if existing is None:
            raise
        logger.info("Thread for pair (%d, %d) created concurrently, reusing %s", low, high, existing.id)
        return existing

    await uow.outbox.add(
        THREAD_CREATED,
        {
            "thread_id": str(thread.id),
            "participants": [low, high],
        },
    )
    await uow.commit()
    logger.info("Created thread %s for pair (%d, %d)", thread.id, low, high)
    return thread


async def list_for_user(
    user_id: int,
    offset: int,
    limit: int,
    uow: UnitOfWork,
) -> list[ThreadSummary]:
    """Active threads of a user, most recent activity first, with a latest-message preview."""
    threads = await uow.threads.list_for_user(user_id, offset=offset, limit=limit)
    if not threads:
        return []

    latest = await uow.messages.latest_for_threads([t.id for t in threads])
    return [
        ThreadSummary(thread=t, latest_message=LatestMessagePreview.of(latest.get(t.id)))
        for t in threads
    ]


async def mark_deleted(
    thread_id: uuid.UUID,
    requester_id: int,
    uow: UnitOfWork,
) -> Thread:
    """Soft-delete a thread. Its messages must already have been purged."""
    thread = await uow.threads.get_by_id(thread_id)
    thread = assert_thread_access(thread, requester_id)

    if not thread.is_deleted:
        await uow.threads_w.mark_deleted(thread_id)
        await uow.outbox.add(
            THREAD_DELETED,
            {
                "thread_id": str(thread_id),
                "deleted_by": requester_id,
            },
        )
    await uow.commit()
    return await uow.threads.get_by_id(thread_id)  # type: ignore[return-value]


async def remove_if_empty(
    thread_id: uuid.UUID,
    uow: UnitOfWork,
) -> bool:
    """Drop the thread record when no messages are left. Does not commit."""
    remaining = await uow.messages.count_for_thread(thread_id)
    if remaining:
        return False

    await uow.threads_w.delete(thread_id)
    logger.info("Removed empty thread %s", thread_id)
    return True
