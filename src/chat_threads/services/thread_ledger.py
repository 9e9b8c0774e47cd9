"""Thread ledger: message append/remove and the thread's latest-activity projection.

The projection (``Thread.latest_activity_at``) is written after the message
itself is committed. If that second write fails the message stays visible and
the projection can be rebuilt from the message set at any time, since both
``touch_latest_activity`` and ``recompute_latest_activity`` are idempotent.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from chat_threads.application.exceptions import NotFoundError, StoreError, ValidationError
from chat_threads.application.policies.permissions import assert_active, assert_thread_access
from chat_threads.application.repositories.outbox import MESSAGE_DELETED, MESSAGE_SENT
from chat_threads.application.uow import UnitOfWork
from chat_threads.domain.entities.message import Message
from chat_threads.services import thread_directory

logger = logging.getLogger(__name__)


def validate_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise ValidationError("Content must not be empty")
    return content


async def append(
    thread_id: uuid.UUID,
    author_id: int,
    content: str | None,
    uow: UnitOfWork,
) -> Message:
    content = validate_content(content)

    thread = await uow.threads.get_by_id(thread_id)
    thread = assert_active(assert_thread_access(thread, author_id))

    msg = Message(
        id=uuid.uuid4(),
        thread_id=thread_id,
        author_id=author_id,
        content=content,
        created_at=datetime.now(timezone.utc),
    )
    msg = await uow.messages_w.create(msg)
    await uow.outbox.add(
        MESSAGE_SENT,
        {
            "message_id": str(msg.id),
            "thread_id": str(msg.thread_id),
            "author_id": msg.author_id,
            "recipient_id": thread.other_participant(author_id),
            "content": msg.content,
            "created_at": msg.created_at.isoformat(),
        },
    )
    await uow.commit()

    try:
        await uow.threads_w.touch_latest_activity(thread_id, msg.created_at)
        await uow.commit()
    except StoreError:
        logger.warning(
            "Latest activity of thread %s not updated for message %s",
            thread_id,
            msg.id,
            exc_info=True,
        )
        await uow.rollback()

    return msg


async def remove(
    message_id: uuid.UUID,
    requester_id: int,
    uow: UnitOfWork,
    *,
    thread_id: uuid.UUID | None = None,
) -> Message:
    """Delete one message; drops the thread when it was the last one.

    When the thread survives, its projection is recomputed so it never points
    at the removed message.
    """
    if thread_id is not None:
        assert_thread_access(await uow.threads.get_by_id(thread_id), requester_id)

    existing = await uow.messages.get_by_id(message_id)
    if existing is None:
        raise NotFoundError("Message not found")
    if thread_id is not None and existing.thread_id != thread_id:
        raise NotFoundError("Message not found in this chat")

    thread = await uow.threads.get_by_id(existing.thread_id)
    assert_thread_access(thread, requester_id)

    deleted = await uow.messages_w.delete(message_id)
    if deleted is None:
        raise NotFoundError("Message not found")

    thread_removed = await thread_directory.remove_if_empty(deleted.thread_id, uow)
    if not thread_removed:
        await uow.threads_w.recompute_latest_activity(deleted.thread_id)

    await uow.outbox.add(
        MESSAGE_DELETED,
        {
            "message_id": str(deleted.id),
            "thread_id": str(deleted.thread_id),
            "deleted_by": requester_id,
            "thread_removed": thread_removed,
        },
    )
    await uow.commit()
    return deleted


async def purge_thread(
    thread_id: uuid.UUID,
    uow: UnitOfWork,
) -> int:
    count = await uow.messages_w.delete_for_thread(thread_id)
    await uow.commit()
    logger.info("Purged %d messages from thread %s", count, thread_id)
    return count


async def list_messages(
    thread_id: uuid.UUID,
    offset: int,
    limit: int,
    uow: UnitOfWork,
) -> list[Message]:
    return await uow.messages.list_messages(thread_id, offset=offset, limit=limit)
