from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Category(str, Enum):
    electronics = "Electronics"
    clothing = "Clothing"
    books = "Books"
    home_garden = "Home & Garden"
    sports = "Sports"
    toys_games = "Toys & Games"
    beauty_health = "Beauty & Health"
    automotive = "Automotive"
    other = "Other"


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category: Category = Category.other
    image_url: str | None = Field(None, max_length=500)


class AnnouncementUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=5000)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    category: Category | None = None
    image_url: str | None = Field(None, max_length=500)

    @field_validator("title", "description", "price", "category")
    @classmethod
    def reject_null(cls, value, info):
        # Only image_url may be cleared; the rest are NOT NULL columns
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class AnnouncementResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: str
    price: Decimal
    image_url: str | None
    category: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AnnouncementFilters(BaseModel):
    """Browse filters; all optional and combined with AND."""

    q: str | None = Field(None, max_length=200)
    min_price: Decimal | None = Field(None, ge=0)
    max_price: Decimal | None = Field(None, ge=0)
    category: Category | None = None
    page: int = Field(1, ge=1)
    per_page: int = Field(20, ge=1, le=100)

    @model_validator(mode="after")
    def check_price_range(self) -> "AnnouncementFilters":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price cannot be greater than max_price")
        return self


class AnnouncementListResponse(BaseModel):
    """Paginated list of announcements"""

    announcements: list[AnnouncementResponse]
    total: int
    page: int
    per_page: int


class DashboardStats(BaseModel):
    """Seller dashboard figures for the current user."""

    total_items: int
    average_price: Decimal
    total_conversations: int
    unread_messages: int
