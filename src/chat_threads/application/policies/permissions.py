from __future__ import annotations

from chat_threads.application.exceptions import ForbiddenError, NotFoundError
from chat_threads.domain.entities.thread import Thread


def assert_thread_access(thread: Thread | None, user_id: int) -> Thread:
    """Raise if the thread doesn't exist or the user is not one of its participants."""
    if thread is None:
        raise NotFoundError("Chat not found")

    if not thread.has_participant(user_id):
        raise ForbiddenError("Not a participant of this chat")

    return thread


def assert_active(thread: Thread) -> Thread:
    if thread.is_deleted:
        raise NotFoundError("Chat not found")
    return thread
