from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from chat_threads.api.deps import CurrentPrincipal, UoWDep
from chat_threads.api.v1.schemas.message import MessageResponse, SendMessageRequest
from chat_threads.config import settings
from chat_threads.services import chat_service

router = APIRouter(prefix="/api/v1/chats/messages", tags=["messages"])


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    msg = await chat_service.send(principal, body.received_id, body.content, uow)
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.get("", response_model=list[MessageResponse])
async def get_messages(
    principal: CurrentPrincipal,
    uow: UoWDep,
    other_user_id: int | None = Query(None),
    chat_id: UUID | None = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.MESSAGES_PAGE_LIMIT, ge=1, le=settings.MESSAGES_MAX_PAGE_LIMIT),
) -> list[MessageResponse]:
    messages = await chat_service.get_messages(
        principal, other_user_id, chat_id, offset, limit, uow,
    )
    return [MessageResponse.model_validate(m, from_attributes=True) for m in messages]


@router.delete("/{message_id}", response_model=MessageResponse)
async def delete_message(
    message_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
    chat_id: UUID | None = Query(None),
) -> MessageResponse:
    msg = await chat_service.delete_message(principal, message_id, chat_id, uow)
    return MessageResponse.model_validate(msg, from_attributes=True)
