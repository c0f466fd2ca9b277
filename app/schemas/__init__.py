from app.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementFilters,
    AnnouncementListResponse,
    AnnouncementResponse,
    AnnouncementUpdate,
    Category,
    DashboardStats,
)
from app.schemas.message import (
    ConversationSummary,
    ConversationThread,
    MessageCreate,
    MessageRecord,
    MessageResponse,
    Participant,
    UnreadCountResponse,
)
from app.schemas.profile import ProfileResponse, ProfileUpdate, UserRole
from app.schemas.user import PasswordChange, Token, TokenPayload, UserCreate, UserResponse
from app.schemas.wishlist import WishlistItemResponse, WishlistStatus

__all__ = [
    "UserCreate",
    "UserResponse",
    "PasswordChange",
    "Token",
    "TokenPayload",
    "ProfileResponse",
    "ProfileUpdate",
    "UserRole",
    "Category",
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "AnnouncementResponse",
    "AnnouncementFilters",
    "AnnouncementListResponse",
    "DashboardStats",
    "WishlistItemResponse",
    "WishlistStatus",
    "MessageCreate",
    "MessageResponse",
    "MessageRecord",
    "Participant",
    "ConversationSummary",
    "ConversationThread",
    "UnreadCountResponse",
]
