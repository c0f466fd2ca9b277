import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.core.permissions import ensure_announcement_owner
from app.database import get_db
from app.models.announcement import Announcement
from app.models.user import User
from app.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementFilters,
    AnnouncementListResponse,
    AnnouncementResponse,
    AnnouncementUpdate,
    Category,
    DashboardStats,
)
from app.services import (
    announcement_service,
    conversation_service,
    message_service,
    storage_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["announcements"])


async def _get_announcement_or_404(
    db: AsyncSession,
    announcement_id: UUID,
) -> Announcement:
    announcement = await announcement_service.get_announcement_by_id(db, announcement_id)
    if not announcement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Announcement not found",
        )
    return announcement


@router.post("/", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    data: AnnouncementCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AnnouncementResponse:
    """Post a new listing owned by the current user."""
    announcement = await announcement_service.create_announcement(db, current_user.id, data)
    logger.info("User %s posted announcement %s", current_user.id, announcement.id)
    return AnnouncementResponse.model_validate(announcement)


@router.get("/", response_model=AnnouncementListResponse)
async def browse_announcements(
    filters: Annotated[AnnouncementFilters, Query()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AnnouncementListResponse:
    """
    Browse listings, newest first.

    Filters (combined):
    - q: text contained in the title or description, case-insensitive
    - min_price / max_price: inclusive price range
    - category: exact category
    """
    announcements, total = await announcement_service.search_announcements(db, filters)

    return AnnouncementListResponse(
        announcements=[AnnouncementResponse.model_validate(a) for a in announcements],
        total=total,
        page=filters.page,
        per_page=filters.per_page,
    )


# NOTE: These specific routes MUST be defined before /{announcement_id}
@router.get("/categories", response_model=list[str])
async def list_categories() -> list[str]:
    """Categories a listing can be filed under."""
    return [category.value for category in Category]


@router.get("/mine", response_model=list[AnnouncementResponse])
async def get_my_announcements(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[AnnouncementResponse]:
    """Listings posted by the current user."""
    announcements = await announcement_service.get_user_announcements(db, current_user.id)
    return [AnnouncementResponse.model_validate(a) for a in announcements]


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DashboardStats:
    """Seller dashboard: listing count, average price and conversation activity."""
    total_items, average_price = await announcement_service.get_owner_price_stats(
        db, current_user.id
    )
    conversations = await message_service.get_conversations(db, current_user.id)

    return DashboardStats(
        total_items=total_items,
        average_price=average_price,
        total_conversations=len(conversations),
        unread_messages=conversation_service.total_unread(conversations),
    )


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AnnouncementResponse:
    """Get a single listing."""
    announcement = await _get_announcement_or_404(db, announcement_id)
    return AnnouncementResponse.model_validate(announcement)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: UUID,
    data: AnnouncementUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AnnouncementResponse:
    """Edit a listing. Owner only."""
    announcement = await _get_announcement_or_404(db, announcement_id)
    ensure_announcement_owner(current_user.id, announcement)

    updated = await announcement_service.update_announcement(db, announcement, data)
    return AnnouncementResponse.model_validate(updated)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a listing. Owner only."""
    announcement = await _get_announcement_or_404(db, announcement_id)
    ensure_announcement_owner(current_user.id, announcement)

    await announcement_service.delete_announcement(db, announcement)


@router.post("/{announcement_id}/image", response_model=AnnouncementResponse)
async def upload_announcement_image(
    announcement_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    file: UploadFile = File(...),
) -> AnnouncementResponse:
    """Upload the listing picture. Owner only."""
    announcement = await _get_announcement_or_404(db, announcement_id)
    ensure_announcement_owner(current_user.id, announcement)

    image_url = await storage_service.save_image(file, "announcements", current_user.id)
    updated = await announcement_service.set_image_url(db, announcement, image_url)
    return AnnouncementResponse.model_validate(updated)
