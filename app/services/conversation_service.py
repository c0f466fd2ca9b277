"""Conversation aggregation over flat message records.

Pure functions only: fetching records and persisting read state live in
message_service.
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from app.schemas.message import ConversationSummary, MessageRecord

logger = logging.getLogger(__name__)


def _is_unread_for(viewer_id: UUID, record: MessageRecord) -> bool:
    return record.receiver.id == viewer_id and not record.is_read


def _newest_first(records: Iterable[MessageRecord]) -> list[MessageRecord]:
    # sorted() is stable, so equal timestamps keep their input order
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def aggregate_conversations(
    viewer_id: UUID,
    records: Iterable[MessageRecord],
) -> list[ConversationSummary]:
    """
    Group message records into one summary per listing.

    The newest record of a listing supplies the other participant and the
    last message; every record addressed to the viewer and still unread adds
    one to the unread count. Records without a listing id or title are
    skipped. Summaries come back most recent conversation first.

    A listing has a single counterpart here: when several buyers wrote about
    the same listing their threads collapse into one summary.
    """
    conversations: dict[UUID, ConversationSummary] = {}

    for record in _newest_first(records):
        if record.announcement_id is None or not record.announcement_title:
            logger.debug("Skipping message %s without a listing", record.id)
            continue

        unread = 1 if _is_unread_for(viewer_id, record) else 0
        existing = conversations.get(record.announcement_id)

        if existing is None:
            conversations[record.announcement_id] = ConversationSummary(
                announcement_id=record.announcement_id,
                announcement_title=record.announcement_title,
                other_user=record.other_participant(viewer_id),
                last_message=record.content,
                last_message_time=record.created_at,
                unread_count=unread,
            )
        else:
            # Older message: the newest one already set the last_message fields
            existing.unread_count += unread

    return list(conversations.values())


def unread_message_ids(
    viewer_id: UUID,
    records: Iterable[MessageRecord],
) -> list[UUID]:
    """Ids of the records addressed to the viewer that are not read yet."""
    return [r.id for r in records if _is_unread_for(viewer_id, r)]


def total_unread(conversations: Iterable[ConversationSummary]) -> int:
    return sum(c.unread_count for c in conversations)
