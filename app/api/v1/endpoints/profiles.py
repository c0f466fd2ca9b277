from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.models.user_profile import UserProfile
from app.schemas.profile import ProfileResponse, ProfileUpdate
from app.services import profile_service, storage_service

router = APIRouter(prefix="", tags=["profiles"])


async def get_current_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserProfile:
    """The signed-in user's profile, created on first use."""
    return await profile_service.ensure_user_profile(db, current_user)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    profile: Annotated[UserProfile, Depends(get_current_profile)],
) -> ProfileResponse:
    """Get the current user's profile."""
    return ProfileResponse.model_validate(profile)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    profile: Annotated[UserProfile, Depends(get_current_profile)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProfileResponse:
    """Update the current user's profile."""
    updated_profile = await profile_service.update_profile(db, profile, profile_data)
    return ProfileResponse.model_validate(updated_profile)


@router.post("/me/photo", response_model=ProfileResponse)
async def upload_profile_photo(
    profile: Annotated[UserProfile, Depends(get_current_profile)],
    db: Annotated[AsyncSession, Depends(get_db)],
    file: UploadFile = File(...),
) -> ProfileResponse:
    """Upload a profile photo (JPEG, PNG, WebP or GIF)."""
    photo_url = await storage_service.save_image(file, "profile-photos", profile.id)
    updated_profile = await profile_service.set_photo_url(db, profile, photo_url)
    return ProfileResponse.model_validate(updated_profile)
