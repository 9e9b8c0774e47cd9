"""Import all models so Base.metadata sees every table."""
from chat_threads.infrastructure.db.models.message import MessageModel
from chat_threads.infrastructure.db.models.outbox import OutboxMessageModel
from chat_threads.infrastructure.db.models.thread import ThreadModel

__all__ = [
    "MessageModel",
    "OutboxMessageModel",
    "ThreadModel",
]
