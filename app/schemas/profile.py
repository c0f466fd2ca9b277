from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    location: str | None = Field(None, max_length=200)


class ProfileResponse(BaseModel):
    id: UUID
    email: str
    role: UserRole
    photo_url: str | None
    location: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
