"""Request-level chat operations composed from the thread directory and ledger."""
from __future__ import annotations

import uuid

from chat_threads.application.dto.principal import Principal
from chat_threads.application.dto.thread import ThreadSummary
from chat_threads.application.exceptions import NotFoundError, ValidationError
from chat_threads.application.policies.permissions import assert_thread_access
from chat_threads.application.uow import UnitOfWork
from chat_threads.domain.entities.message import Message
from chat_threads.domain.entities.thread import Thread
from chat_threads.services import thread_directory, thread_ledger


async def send(
    principal: Principal,
    received_id: int,
    content: str | None,
    uow: UnitOfWork,
) -> Message:
    # Reject before touching the directory so an empty send leaves no thread behind.
    content = thread_ledger.validate_content(content)
    thread = await thread_directory.resolve_or_create(principal.user_id, received_id, uow)
    return await thread_ledger.append(thread.id, principal.user_id, content, uow)


async def get_chats(
    principal: Principal,
    offset: int,
    limit: int,
    uow: UnitOfWork,
) -> list[ThreadSummary]:
    return await thread_directory.list_for_user(principal.user_id, offset, limit, uow)


async def get_messages(
    principal: Principal,
    other_user_id: int | None,
    chat_id: uuid.UUID | None,
    offset: int,
    limit: int,
    uow: UnitOfWork,
) -> list[Message]:
    """Messages of a chat identified either by the other participant or by chat id.

    ``other_user_id`` takes precedence when both are given.
    """
    if other_user_id is not None:
        thread = await uow.threads.get_active_for_pair(principal.user_id, other_user_id)
        if thread is None:
            raise NotFoundError("Chat does not exist between 2 users")
    elif chat_id is not None:
        thread = await uow.threads.get_by_id(chat_id)
        thread = assert_thread_access(thread, principal.user_id)
    else:
        raise ValidationError("Other user id or chat id must be provided")

    return await thread_ledger.list_messages(thread.id, offset, limit, uow)


async def delete_message(
    principal: Principal,
    message_id: uuid.UUID,
    chat_id: uuid.UUID | None,
    uow: UnitOfWork,
) -> Message:
    return await thread_ledger.remove(message_id, principal.user_id, uow, thread_id=chat_id)


async def delete_chat(
    principal: Principal,
    chat_id: uuid.UUID,
    uow: UnitOfWork,
) -> Thread:
    """Purge every message, then soft-delete the thread.

    The purge is committed first: a failure in between leaves an empty but
    live thread, never messages without a thread.
    """
    thread = await uow.threads.get_by_id(chat_id)
    assert_thread_access(thread, principal.user_id)

    await thread_ledger.purge_thread(chat_id, uow)
    return await thread_directory.mark_deleted(chat_id, principal.user_id, uow)
