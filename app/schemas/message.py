"""Message schemas for API requests, responses and aggregation input."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Send a message about a listing. Receiver defaults to the listing owner."""
    model_config = ConfigDict(str_strip_whitespace=True)

    announcement_id: UUID
    content: str = Field(..., min_length=1, max_length=2000)
    receiver_id: UUID | None = None


class MessageResponse(BaseModel):
    """Message response."""
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    announcement_id: UUID | None
    content: str
    is_read: bool
    read_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Participant(BaseModel):
    """Display identity of a message sender or receiver."""
    id: UUID
    email: str | None = None


class MessageRecord(BaseModel):
    """
    A message row joined with its listing and both participants.

    Listing fields are optional because the listing may be gone; the
    aggregator skips such records.
    """
    id: UUID
    sender: Participant
    receiver: Participant
    announcement_id: UUID | None = None
    announcement_title: str | None = None
    announcement_owner_id: UUID | None = None
    content: str
    created_at: datetime
    is_read: bool = False

    def other_participant(self, viewer_id: UUID) -> Participant:
        """The receiver when the viewer sent the message, the sender otherwise."""
        if self.sender.id == viewer_id:
            return self.receiver
        return self.sender


class ConversationSummary(BaseModel):
    """One entry of the conversation list, derived per listing."""
    announcement_id: UUID
    announcement_title: str
    other_user: Participant
    last_message: str
    last_message_time: datetime
    unread_count: int


class ConversationThread(BaseModel):
    """An opened conversation: the listing and its messages, oldest first."""
    announcement_id: UUID
    announcement_title: str
    announcement_owner_id: UUID
    messages: list[MessageResponse]


class UnreadCountResponse(BaseModel):
    """Unread messages count."""
    count: int
