from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class SendMessageRequest(BaseModel):
    received_id: int
    content: str | None = None


class MessageResponse(BaseModel):
    id: UUID
    chat_id: UUID = Field(validation_alias=AliasChoices("chat_id", "thread_id"))
    author_id: int
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
