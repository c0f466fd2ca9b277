import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.models.user_profile import UserProfile
from app.schemas.profile import ProfileUpdate

logger = logging.getLogger(__name__)


async def get_profile(db: AsyncSession, user_id: UUID) -> UserProfile | None:
    """Get profile by user ID."""
    result = await db.execute(select(UserProfile).where(UserProfile.id == user_id))
    return result.scalar_one_or_none()


async def ensure_user_profile(db: AsyncSession, user: User) -> UserProfile:
    """
    Return the user's profile, creating it on first access.

    Two concurrent first requests may both try to insert; the loser
    rolls back and reads the row the winner wrote.
    """
    profile = await get_profile(db, user.id)
    if profile:
        return profile

    profile = UserProfile(id=user.id, email=user.email, role="user")
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        profile = await get_profile(db, user.id)
        if profile is None:
            raise
        return profile

    await db.refresh(profile)
    logger.info("Created profile for user %s", user.id)
    return profile


async def update_profile(
    db: AsyncSession, profile: UserProfile, data: ProfileUpdate
) -> UserProfile:
    """Update profile fields. Only update fields that are provided."""
    update_data = data.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)
    return profile


async def set_photo_url(
    db: AsyncSession, profile: UserProfile, photo_url: str
) -> UserProfile:
    profile.photo_url = photo_url
    await db.commit()
    await db.refresh(profile)
    return profile
