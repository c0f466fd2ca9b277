from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.schemas.announcement import AnnouncementResponse


class WishlistItemResponse(BaseModel):
    id: UUID
    announcement: AnnouncementResponse
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WishlistStatus(BaseModel):
    announcement_id: UUID
    in_wishlist: bool
