from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Index, String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from chat_threads.infrastructure.db.base import Base


class ThreadModel(Base):
    __tablename__ = "threads"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False, default="private")
    # Participant pair, always stored with member_low_id < member_high_id.
    member_low_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    member_high_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    latest_activity_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=text("now()"),
    )

    __table_args__ = (
        CheckConstraint("member_low_id < member_high_id", name="ordered_pair"),
        Index(
            "uq_threads_active_pair",
            "member_low_id",
            "member_high_id",
            unique=True,
            postgresql_where=text("NOT is_deleted"),
        ),
        Index("ix_threads_member_low_activity", "member_low_id", latest_activity_at.desc()),
        Index("ix_threads_member_high_activity", "member_high_id", latest_activity_at.desc()),
    )
