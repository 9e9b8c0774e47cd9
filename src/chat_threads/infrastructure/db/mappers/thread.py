from __future__ import annotations

from chat_threads.domain.entities.thread import Thread
from chat_threads.infrastructure.db.models.thread import ThreadModel


def model_to_entity(model: ThreadModel) -> Thread:
    return Thread(
        id=model.id,
        kind=model.kind,
        member_low_id=model.member_low_id,
        member_high_id=model.member_high_id,
        latest_activity_at=model.latest_activity_at,
        is_deleted=model.is_deleted,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def entity_to_model(entity: Thread) -> ThreadModel:
    return ThreadModel(
        id=entity.id,
        kind=entity.kind,
        member_low_id=entity.member_low_id,
        member_high_id=entity.member_high_id,
        latest_activity_at=entity.latest_activity_at,
        is_deleted=entity.is_deleted,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )
