from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.models.announcement import Announcement
from app.models.wishlist import WishlistItem


async def get_wishlist_item(
    db: AsyncSession,
    user_id: UUID,
    announcement_id: UUID,
) -> WishlistItem | None:
    """Get the entry for a (user, listing) pair, if any."""
    result = await db.execute(
        select(WishlistItem).where(
            and_(
                WishlistItem.user_id == user_id,
                WishlistItem.announcement_id == announcement_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_wishlist_item_by_id(
    db: AsyncSession,
    item_id: UUID,
) -> WishlistItem | None:
    result = await db.execute(select(WishlistItem).where(WishlistItem.id == item_id))
    return result.scalar_one_or_none()


async def add_to_wishlist(
    db: AsyncSession,
    user_id: UUID,
    announcement_id: UUID,
) -> WishlistItem:
    """Add a listing to the wishlist. Raises ConflictError on a duplicate pair."""
    item = WishlistItem(user_id=user_id, announcement_id=announcement_id)
    db.add(item)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(
            message="Announcement is already in your wishlist",
            field="announcement_id",
        )
    await db.refresh(item)
    return item


async def remove_from_wishlist(
    db: AsyncSession,
    item: WishlistItem,
) -> None:
    await db.delete(item)
    await db.commit()


async def toggle_wishlist(
    db: AsyncSession,
    user_id: UUID,
    announcement_id: UUID,
) -> bool:
    """Add the listing if absent, remove it if present. Returns the new state."""
    existing = await get_wishlist_item(db, user_id, announcement_id)
    if existing:
        await remove_from_wishlist(db, existing)
        return False

    await add_to_wishlist(db, user_id, announcement_id)
    return True


async def get_user_wishlist(
    db: AsyncSession,
    user_id: UUID,
) -> list[WishlistItem]:
    """Wishlist entries with their listing loaded, newest first."""
    result = await db.execute(
        select(WishlistItem)
        .join(Announcement, WishlistItem.announcement_id == Announcement.id)
        .where(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.created_at.desc())
    )
    return list(result.unique().scalars().all())
