"""Message service: loading, sending and read-state of listing conversations."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.exceptions import NotFoundError, ServerError
from app.core.permissions import ensure_can_message, ensure_conversation_participant
from app.models.announcement import Announcement
from app.models.message import Message
from app.models.user import User
from app.schemas.message import (
    ConversationSummary,
    ConversationThread,
    MessageCreate,
    MessageRecord,
    MessageResponse,
    Participant,
)
from app.services import conversation_service, user_service

logger = logging.getLogger(__name__)


def _involves(user_id: UUID):
    return or_(Message.sender_id == user_id, Message.receiver_id == user_id)


async def fetch_message_records(
    db: AsyncSession,
    viewer_id: UUID,
    announcement_id: UUID | None = None,
) -> list[MessageRecord]:
    """
    Load every message the viewer sent or received, newest first, joined
    with its listing and both participants' e-mail.
    Optionally restricted to one listing.
    """
    sender = aliased(User)
    receiver = aliased(User)

    query = (
        select(
            Message,
            Announcement.title,
            Announcement.user_id,
            sender.email,
            receiver.email,
        )
        .outerjoin(Announcement, Message.announcement_id == Announcement.id)
        .outerjoin(sender, Message.sender_id == sender.id)
        .outerjoin(receiver, Message.receiver_id == receiver.id)
        .where(_involves(viewer_id))
    )
    if announcement_id is not None:
        query = query.where(Message.announcement_id == announcement_id)

    query = query.order_by(Message.created_at.desc())

    try:
        result = await db.execute(query)
    except SQLAlchemyError:
        logger.exception("Failed to load messages for user %s", viewer_id)
        raise ServerError(message="Failed to load conversations. Please try again.")

    records = []
    for message, title, owner_id, sender_email, receiver_email in result.all():
        records.append(MessageRecord(
            id=message.id,
            sender=Participant(id=message.sender_id, email=sender_email),
            receiver=Participant(id=message.receiver_id, email=receiver_email),
            announcement_id=message.announcement_id,
            announcement_title=title,
            announcement_owner_id=owner_id,
            content=message.content,
            created_at=message.created_at,
            is_read=message.is_read,
        ))
    return records


async def get_conversations(
    db: AsyncSession,
    viewer_id: UUID,
) -> list[ConversationSummary]:
    """Conversation list for the viewer, most recent first."""
    records = await fetch_message_records(db, viewer_id)
    return conversation_service.aggregate_conversations(viewer_id, records)


async def get_thread_messages(
    db: AsyncSession,
    viewer_id: UUID,
    announcement_id: UUID,
) -> list[Message]:
    """Messages on a listing involving the viewer, oldest first, as stored."""
    result = await db.execute(
        select(Message)
        .where(
            and_(
                Message.announcement_id == announcement_id,
                _involves(viewer_id),
            )
        )
        .order_by(Message.created_at.asc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def mark_messages_read(
    db: AsyncSession,
    reader_id: UUID,
    message_ids: list[UUID],
) -> int:
    """
    Persist is_read for the given messages addressed to reader_id.

    Returns the number of rows changed. A failure is rolled back and raised
    as ServerError; nothing is reported as read unless the commit succeeded.
    """
    if not message_ids:
        return 0

    try:
        result = await db.execute(
            update(Message)
            .where(
                and_(
                    Message.id.in_(message_ids),
                    Message.receiver_id == reader_id,
                    Message.is_read == False,
                )
            )
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="fetch")
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(
            "Failed to mark %d messages read for user %s", len(message_ids), reader_id
        )
        raise ServerError(message="Failed to mark messages as read")

    logger.info("Marked %d messages read for user %s", result.rowcount, reader_id)
    return result.rowcount


async def open_conversation(
    db: AsyncSession,
    viewer_id: UUID,
    announcement: Announcement,
) -> ConversationThread:
    """
    Open the viewer's conversation on a listing.

    Unread messages addressed to the viewer are marked read first, then the
    thread is read back from the database so the returned flags are the
    persisted ones.
    """
    records = await fetch_message_records(db, viewer_id, announcement.id)
    ensure_conversation_participant(viewer_id, announcement.user_id, records)

    unread_ids = conversation_service.unread_message_ids(viewer_id, records)
    await mark_messages_read(db, viewer_id, unread_ids)

    messages = await get_thread_messages(db, viewer_id, announcement.id)
    return ConversationThread(
        announcement_id=announcement.id,
        announcement_title=announcement.title,
        announcement_owner_id=announcement.user_id,
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


async def send_message(
    db: AsyncSession,
    sender_id: UUID,
    announcement: Announcement,
    data: MessageCreate,
) -> Message:
    """
    Create a message about a listing.
    Without an explicit receiver the message goes to the listing owner.
    """
    receiver_id = data.receiver_id or announcement.user_id
    ensure_can_message(sender_id, receiver_id, announcement.user_id)

    receiver = await user_service.get_user_by_id(db, receiver_id)
    if receiver is None:
        raise NotFoundError(message="Receiver not found", resource="user")

    message = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        announcement_id=announcement.id,
        content=data.content,
    )
    db.add(message)
    await db.commit()
    await db.refresh(message)
    return message


async def get_unread_count(
    db: AsyncSession,
    user_id: UUID,
) -> int:
    """Unread messages addressed to the user on existing listings."""
    result = await db.execute(
        select(func.count(Message.id)).where(
            and_(
                Message.receiver_id == user_id,
                Message.is_read == False,
                Message.announcement_id.is_not(None),
            )
        )
    )
    return result.scalar() or 0
