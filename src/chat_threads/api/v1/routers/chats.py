from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from chat_threads.api.deps import CurrentPrincipal, UoWDep
from chat_threads.api.v1.schemas.chat import ChatResponse, ChatSummaryResponse
from chat_threads.config import settings
from chat_threads.services import chat_service

router = APIRouter(prefix="/api/v1/chats", tags=["chats"])


@router.get("", response_model=list[ChatSummaryResponse])
async def get_chats(
    principal: CurrentPrincipal,
    uow: UoWDep,
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.CHATS_PAGE_LIMIT, ge=1, le=settings.CHATS_MAX_PAGE_LIMIT),
) -> list[ChatSummaryResponse]:
    summaries = await chat_service.get_chats(principal, offset, limit, uow)
    return [ChatSummaryResponse.from_summary(s) for s in summaries]


@router.delete("/{chat_id}", response_model=ChatResponse)
async def delete_chat(
    chat_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ChatResponse:
    thread = await chat_service.delete_chat(principal, chat_id, uow)
    return ChatResponse.model_validate(thread, from_attributes=True)
