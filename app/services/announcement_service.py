import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.announcement import Announcement
from app.models.message import Message
from app.models.wishlist import WishlistItem
from app.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementFilters,
    AnnouncementUpdate,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


async def create_announcement(
    db: AsyncSession,
    owner_id: UUID,
    data: AnnouncementCreate,
) -> Announcement:
    """Create a new listing owned by owner_id."""
    announcement = Announcement(
        user_id=owner_id,
        title=data.title,
        description=data.description,
        price=data.price,
        category=data.category.value,
        image_url=data.image_url,
    )
    db.add(announcement)
    await db.commit()
    await db.refresh(announcement)
    return announcement


async def get_announcement_by_id(
    db: AsyncSession,
    announcement_id: UUID,
) -> Announcement | None:
    """Get listing by ID."""
    result = await db.execute(
        select(Announcement).where(Announcement.id == announcement_id)
    )
    return result.scalar_one_or_none()


async def search_announcements(
    db: AsyncSession,
    filters: AnnouncementFilters,
) -> tuple[list[Announcement], int]:
    """
    Browse listings, newest first.
    Returns (announcements, total_count) for pagination.
    """
    query = select(Announcement)

    if filters.q and filters.q.strip():
        pattern = f"%{filters.q.strip()}%"
        query = query.where(
            or_(
                Announcement.title.ilike(pattern),
                Announcement.description.ilike(pattern),
            )
        )

    if filters.min_price is not None:
        query = query.where(Announcement.price >= filters.min_price)

    if filters.max_price is not None:
        query = query.where(Announcement.price <= filters.max_price)

    if filters.category:
        query = query.where(Announcement.category == filters.category.value)

    # Get total count
    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    # Apply pagination and ordering
    offset = (filters.page - 1) * filters.per_page
    query = (
        query.order_by(Announcement.created_at.desc())
        .offset(offset)
        .limit(filters.per_page)
    )

    result = await db.execute(query)
    announcements = list(result.scalars().all())

    return announcements, total


async def get_user_announcements(
    db: AsyncSession,
    owner_id: UUID,
) -> list[Announcement]:
    """All listings of one user, newest first."""
    result = await db.execute(
        select(Announcement)
        .where(Announcement.user_id == owner_id)
        .order_by(Announcement.created_at.desc())
    )
    return list(result.scalars().all())


async def update_announcement(
    db: AsyncSession,
    announcement: Announcement,
    data: AnnouncementUpdate,
) -> Announcement:
    """Update listing fields. Only update fields that are provided."""
    update_data = data.model_dump(exclude_unset=True)

    # Convert enums to values
    for key, value in update_data.items():
        if hasattr(value, "value"):
            update_data[key] = value.value

    for field, value in update_data.items():
        setattr(announcement, field, value)

    await db.commit()
    await db.refresh(announcement)
    return announcement


async def set_image_url(
    db: AsyncSession,
    announcement: Announcement,
    image_url: str,
) -> Announcement:
    announcement.image_url = image_url
    await db.commit()
    await db.refresh(announcement)
    return announcement


async def delete_announcement(
    db: AsyncSession,
    announcement: Announcement,
) -> None:
    """
    Delete a listing. Wishlist entries go with it; its messages stay
    behind with no listing. Done explicitly as SQLite ignores the
    foreign key actions.
    """
    announcement_id = announcement.id
    await db.execute(
        delete(WishlistItem).where(WishlistItem.announcement_id == announcement_id)
    )
    await db.execute(
        update(Message)
        .where(Message.announcement_id == announcement_id)
        .values(announcement_id=None)
    )
    await db.delete(announcement)
    await db.commit()
    logger.info("Deleted announcement %s", announcement_id)


async def get_owner_price_stats(
    db: AsyncSession,
    owner_id: UUID,
) -> tuple[int, Decimal]:
    """Return (listing count, average price) for one owner."""
    result = await db.execute(
        select(func.count(Announcement.id), func.avg(Announcement.price)).where(
            Announcement.user_id == owner_id
        )
    )
    count, average = result.one()
    if not count:
        return 0, Decimal("0.00")
    return count, Decimal(str(average)).quantize(CENTS)
