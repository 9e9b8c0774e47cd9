from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chat_threads.domain.entities.message import Message
from chat_threads.infrastructure.db.mappers import message as mapper
from chat_threads.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None

    async def list_messages(
        self,
        thread_id: UUID,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.thread_id == thread_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count_for_thread(self, thread_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(MessageModel)
            .where(MessageModel.thread_id == thread_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def latest_for_threads(self, thread_ids: list[UUID]) -> dict[UUID, Message]:
        if not thread_ids:
            return {}
        # DISTINCT ON (thread_id) keeps the first row per thread in ORDER BY order.
        stmt = (
            select(MessageModel)
            .where(MessageModel.thread_id.in_(thread_ids))
            .distinct(MessageModel.thread_id)
            .order_by(
                MessageModel.thread_id,
                MessageModel.created_at.desc(),
                MessageModel.id.desc(),
            )
        )
        result = await self._session.execute(stmt)
        return {m.thread_id: mapper.model_to_entity(m) for m in result.scalars().all()}


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def delete(self, message_id: UUID) -> Message | None:
        stmt = (
            delete(MessageModel)
            .where(MessageModel.id == message_id)
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def delete_for_thread(self, thread_id: UUID) -> int:
        stmt = (
            delete(MessageModel)
            .where(MessageModel.thread_id == thread_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
