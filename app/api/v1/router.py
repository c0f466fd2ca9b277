from fastapi import APIRouter

from app.api.v1.endpoints import (
    announcements,
    auth,
    messages,
    profiles,
    wishlist,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth")
router.include_router(profiles.router, prefix="/profiles")
router.include_router(announcements.router, prefix="/announcements")
router.include_router(wishlist.router, prefix="/wishlist")
router.include_router(messages.router, prefix="/messages")
