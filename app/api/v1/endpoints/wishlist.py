from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.wishlist import WishlistItemResponse, WishlistStatus
from app.services import announcement_service, wishlist_service

router = APIRouter(prefix="", tags=["wishlist"])


@router.get("/", response_model=list[WishlistItemResponse])
async def get_my_wishlist(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[WishlistItemResponse]:
    """Listings the current user saved, newest first."""
    items = await wishlist_service.get_user_wishlist(db, current_user.id)
    return [WishlistItemResponse.model_validate(item) for item in items]


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_wishlist_entry(
    entry_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Remove an entry from your wishlist."""
    item = await wishlist_service.get_wishlist_item_by_id(db, entry_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wishlist entry not found",
        )

    if item.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not your wishlist entry",
        )

    await wishlist_service.remove_from_wishlist(db, item)


@router.get("/{announcement_id}", response_model=WishlistStatus)
async def get_wishlist_status(
    announcement_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WishlistStatus:
    """Whether a listing is in the current user's wishlist."""
    item = await wishlist_service.get_wishlist_item(db, current_user.id, announcement_id)
    return WishlistStatus(announcement_id=announcement_id, in_wishlist=item is not None)


@router.post("/{announcement_id}/toggle", response_model=WishlistStatus)
async def toggle_wishlist(
    announcement_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WishlistStatus:
    """Add the listing to the wishlist, or remove it if already there."""
    announcement = await announcement_service.get_announcement_by_id(db, announcement_id)
    if not announcement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Announcement not found",
        )

    in_wishlist = await wishlist_service.toggle_wishlist(
        db, current_user.id, announcement_id
    )
    return WishlistStatus(announcement_id=announcement_id, in_wishlist=in_wishlist)
