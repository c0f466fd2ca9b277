"""
Seed script to populate the database with marketplace data for development.
Run with: python scripts/seed_test_data.py
"""

import asyncio
import random
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add parent directory to path so we can import app
sys.path.insert(0, str(Path(__file__).parent.parent))

from faker import Faker

from app.core.security import hash_password
from app.database import async_session_maker
from app.models.announcement import Announcement
from app.models.message import Message
from app.models.user import User
from app.models.user_profile import UserProfile
from app.models.wishlist import WishlistItem
from app.schemas.announcement import Category

fake = Faker()

# Configuration
NUM_USERS = 20
NUM_ANNOUNCEMENTS = 60
NUM_CONVERSATIONS = 40
TEST_PASSWORD = "Test1234!"


async def seed_users(db) -> list[User]:
    """Create test users, each with a profile."""
    users = []
    password_hash = hash_password(TEST_PASSWORD)

    print(f"Creating {NUM_USERS} test users...")

    for i in range(NUM_USERS):
        user = User(
            email=f"user{i + 1}@test.marketplace.local",
            password_hash=password_hash,
        )
        db.add(user)
        await db.flush()

        db.add(UserProfile(
            id=user.id,
            email=user.email,
            role="user",
            location=fake.city() if random.random() < 0.7 else None,
        ))
        users.append(user)

    return users


async def seed_announcements(db, users: list[User]) -> list[Announcement]:
    """Create listings spread over users and categories."""
    announcements = []
    categories = [c.value for c in Category]
    now = datetime.now(timezone.utc)

    print(f"Creating {NUM_ANNOUNCEMENTS} announcements...")

    for _ in range(NUM_ANNOUNCEMENTS):
        announcement = Announcement(
            user_id=random.choice(users).id,
            title=fake.sentence(nb_words=4).rstrip("."),
            description=fake.paragraph(nb_sentences=3),
            price=Decimal(random.randint(100, 50000)) / 100,
            category=random.choice(categories),
            created_at=now - timedelta(hours=random.randint(1, 24 * 60)),
        )
        db.add(announcement)
        announcements.append(announcement)

    await db.flush()
    return announcements


async def seed_conversations(db, users: list[User], announcements: list[Announcement]) -> list[Message]:
    """Create buyer/owner message exchanges, some unread."""
    messages = []

    print(f"Creating {NUM_CONVERSATIONS} conversations...")

    for _ in range(NUM_CONVERSATIONS):
        announcement = random.choice(announcements)
        buyer = random.choice([u for u in users if u.id != announcement.user_id])
        sent_at = announcement.created_at + timedelta(hours=random.randint(1, 48))

        for turn in range(random.randint(1, 6)):
            from_buyer = turn % 2 == 0
            message = Message(
                sender_id=buyer.id if from_buyer else announcement.user_id,
                receiver_id=announcement.user_id if from_buyer else buyer.id,
                announcement_id=announcement.id,
                content=fake.sentence(nb_words=random.randint(3, 15)),
                is_read=random.random() < 0.6,
                created_at=sent_at,
            )
            db.add(message)
            messages.append(message)
            sent_at += timedelta(minutes=random.randint(1, 600))

    return messages


async def seed_wishlists(db, users: list[User], announcements: list[Announcement]) -> int:
    """Each user saves a few listings they do not own."""
    count = 0
    for user in users:
        candidates = [a for a in announcements if a.user_id != user.id]
        for announcement in random.sample(candidates, k=min(3, len(candidates))):
            db.add(WishlistItem(user_id=user.id, announcement_id=announcement.id))
            count += 1
    return count


async def main():
    async with async_session_maker() as db:
        try:
            users = await seed_users(db)
            announcements = await seed_announcements(db, users)
            messages = await seed_conversations(db, users, announcements)
            wishlist_count = await seed_wishlists(db, users, announcements)

            await db.commit()

            print("\n" + "=" * 50)
            print("Summary:")
            print("=" * 50)
            print(f"  Users created: {len(users)}")
            print(f"  Announcements created: {len(announcements)}")
            print(f"  Messages created: {len(messages)}")
            print(f"    - Unread: {len([m for m in messages if not m.is_read])}")
            print(f"  Wishlist entries created: {wishlist_count}")
            print("\nTest user login:")
            print("  Email: user1@test.marketplace.local")
            print(f"  Password: {TEST_PASSWORD}")
            print("=" * 50)

        except Exception as e:
            print(f"\nError: {e}")
            await db.rollback()
            raise


if __name__ == "__main__":
    asyncio.run(main())
