from app.models.announcement import Announcement
from app.models.message import Message
from app.models.user import User
from app.models.user_profile import UserProfile
from app.models.wishlist import WishlistItem

__all__ = [
    "User",
    "UserProfile",
    "Announcement",
    "Message",
    "WishlistItem",
]
