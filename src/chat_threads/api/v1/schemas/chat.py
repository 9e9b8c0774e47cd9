from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from chat_threads.application.dto.thread import ThreadSummary


class ChatResponse(BaseModel):
    id: UUID
    type: str = Field(validation_alias=AliasChoices("type", "kind"))
    participants: list[int]
    latest_activity_at: datetime | None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LatestMessageResponse(BaseModel):
    content: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ChatSummaryResponse(ChatResponse):
    latest_message: LatestMessageResponse

    @classmethod
    def from_summary(cls, summary: ThreadSummary) -> ChatSummaryResponse:
        chat = ChatResponse.model_validate(summary.thread, from_attributes=True)
        return cls(
            **chat.model_dump(),
            latest_message=LatestMessageResponse.model_validate(
                summary.latest_message, from_attributes=True,
            ),
        )
