"""
Ownership and participation checks.

The viewer id is always passed in explicitly; nothing here reads request state.
"""

from collections.abc import Iterable
from uuid import UUID

from app.core.exceptions import NotOwnerError, NotParticipantError, ValidationError
from app.models.announcement import Announcement
from app.schemas.message import MessageRecord


def is_announcement_owner(viewer_id: UUID, announcement: Announcement) -> bool:
    return announcement.user_id == viewer_id


def ensure_announcement_owner(viewer_id: UUID, announcement: Announcement) -> None:
    """Raise NotOwnerError unless the viewer owns the listing."""
    if not is_announcement_owner(viewer_id, announcement):
        raise NotOwnerError()


def is_conversation_participant(
    viewer_id: UUID,
    owner_id: UUID,
    records: Iterable[MessageRecord],
) -> bool:
    """
    The listing owner always takes part in its conversation. Anyone else
    must be the sender or receiver of at least one message on it.
    """
    if viewer_id == owner_id:
        return True
    return any(viewer_id in (r.sender.id, r.receiver.id) for r in records)


def ensure_conversation_participant(
    viewer_id: UUID,
    owner_id: UUID,
    records: Iterable[MessageRecord],
) -> None:
    if not is_conversation_participant(viewer_id, owner_id, records):
        raise NotParticipantError()


def ensure_can_message(sender_id: UUID, receiver_id: UUID, owner_id: UUID) -> None:
    """
    A message about a listing goes between its owner and one other user.
    """
    if sender_id == receiver_id:
        raise ValidationError(
            message="You cannot send a message to yourself",
            field="receiver_id",
        )
    if owner_id not in (sender_id, receiver_id):
        raise NotParticipantError(
            message="Messages about a listing must involve its owner",
        )
