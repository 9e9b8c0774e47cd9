from __future__ import annotations

from chat_threads.domain.entities.message import Message
from chat_threads.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        thread_id=model.thread_id,
        author_id=model.author_id,
        content=model.content,
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        thread_id=entity.thread_id,
        author_id=entity.author_id,
        content=entity.content,
        created_at=entity.created_at,
    )
