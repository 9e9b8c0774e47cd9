from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chat_threads.application.exceptions import ConflictError, StoreError
from chat_threads.domain.entities.thread import Thread, ordered_pair
from chat_threads.infrastructure.db.mappers import thread as mapper
from chat_threads.infrastructure.db.models.message import MessageModel
from chat_threads.infrastructure.db.models.thread import ThreadModel


class ThreadReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, thread_id: UUID) -> Thread | None:
        result = await self._session.get(ThreadModel, thread_id, populate_existing=True)
        return mapper.model_to_entity(result) if result else None

    async def get_active_for_pair(self, user_a: int, user_b: int) -> Thread | None:
        low, high = ordered_pair(user_a, user_b)
        stmt = (
            select(ThreadModel)
            .where(
                ThreadModel.member_low_id == low,
                ThreadModel.member_high_id == high,
                ThreadModel.is_deleted.is_(False),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_for_user(
        self,
        user_id: int,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Thread]:
        stmt = (
            select(ThreadModel)
            .where(
                or_(
                    ThreadModel.member_low_id == user_id,
                    ThreadModel.member_high_id == user_id,
                ),
                ThreadModel.is_deleted.is_(False),
            )
            .order_by(
                ThreadModel.latest_activity_at.desc().nullslast(),
                ThreadModel.created_at.desc(),
                ThreadModel.id,
            )
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ThreadWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, thread: Thread) -> Thread:
        model = mapper.entity_to_model(thread)
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as exc:
            raise ConflictError("A chat between these users already exists") from exc
        return mapper.model_to_entity(model)

    async def mark_deleted(self, thread_id: UUID) -> None:
        stmt = (
            update(ThreadModel)
            .where(ThreadModel.id == thread_id)
            .values(is_deleted=True)
        )
        await self._session.execute(stmt)

    async def delete(self, thread_id: UUID) -> None:
        await self._session.execute(delete(ThreadModel).where(ThreadModel.id == thread_id))

    async def touch_latest_activity(self, thread_id: UUID, ts: datetime) -> None:
        stmt = (
            update(ThreadModel)
            .where(
                ThreadModel.id == thread_id,
                ThreadModel.latest_activity_at.is_(None) | (ThreadModel.latest_activity_at < ts),
            )
            .values(latest_activity_at=ts)
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreError(f"touch_latest_activity failed for {thread_id}") from exc

    async def recompute_latest_activity(self, thread_id: UUID) -> None:
        newest = (
            select(func.max(MessageModel.created_at))
            .where(MessageModel.thread_id == thread_id)
            .scalar_subquery()
        )
        stmt = (
            update(ThreadModel)
            .where(ThreadModel.id == thread_id)
            .values(latest_activity_at=newest)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
