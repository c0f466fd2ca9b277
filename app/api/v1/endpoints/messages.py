from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.message import (
    ConversationSummary,
    ConversationThread,
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)
from app.services import announcement_service, message_service

router = APIRouter(prefix="", tags=["messages"])


@router.get("/conversations", response_model=list[ConversationSummary])
async def get_conversations(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ConversationSummary]:
    """
    One entry per listing the current user has messages about, most recent
    first, with the last message and the number of unread messages.
    """
    return await message_service.get_conversations(db, current_user.id)


@router.get("/conversations/{announcement_id}", response_model=ConversationThread)
async def open_conversation(
    announcement_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ConversationThread:
    """
    Open the conversation about a listing.

    Marks the messages addressed to you as read and returns the thread,
    oldest message first.
    """
    announcement = await announcement_service.get_announcement_by_id(db, announcement_id)
    if not announcement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Announcement not found",
        )

    return await message_service.open_conversation(db, current_user.id, announcement)


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """
    Send a message about a listing.

    Without receiver_id the message goes to the listing owner; the owner
    answers a buyer by passing the buyer's id.
    """
    announcement = await announcement_service.get_announcement_by_id(
        db, data.announcement_id
    )
    if not announcement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Announcement not found",
        )

    message = await message_service.send_message(db, current_user.id, announcement, data)
    return MessageResponse.model_validate(message)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UnreadCountResponse:
    """Number of unread messages addressed to the current user."""
    count = await message_service.get_unread_count(db, current_user.id)
    return UnreadCountResponse(count=count)
