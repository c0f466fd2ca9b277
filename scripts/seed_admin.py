#!/usr/bin/env python3
"""Seed script to create an admin user."""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.core.security import hash_password
from app.database import async_session_maker
from app.models.user import User
from app.models.user_profile import UserProfile


async def create_admin_user(
    email: str = "admin@marketplace.local",
    password: str = "admin1234",
) -> None:
    """Create an admin user (with profile) if it doesn't exist."""
    async with async_session_maker() as db:
        result = await db.execute(select(User).where(User.email == email))
        existing_user = result.scalar_one_or_none()

        if existing_user:
            print(f"User already exists: {email}")
            await _grant_admin(db, existing_user)
            return

        admin = User(email=email, password_hash=hash_password(password))
        db.add(admin)
        await db.flush()
        db.add(UserProfile(id=admin.id, email=email, role="admin"))
        await db.commit()
        print(f"Created admin user: {email}")
        print(f"Password: {password}")
        print("\nYou can now login with these credentials.")


async def _grant_admin(db, user: User) -> None:
    result = await db.execute(select(UserProfile).where(UserProfile.id == user.id))
    profile = result.scalar_one_or_none()

    if profile is None:
        db.add(UserProfile(id=user.id, email=user.email, role="admin"))
    elif profile.role == "admin":
        print(f"User is already an admin: {user.email}")
        return
    else:
        profile.role = "admin"

    await db.commit()
    print(f"Made user admin: {user.email}")


async def make_user_admin(email: str) -> None:
    """Make an existing user an admin."""
    async with async_session_maker() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if not user:
            print(f"User not found: {email}")
            return

        await _grant_admin(db, user)


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Admin user seeder")
    parser.add_argument(
        "--email",
        default="admin@marketplace.local",
        help="Admin email (default: admin@marketplace.local)",
    )
    parser.add_argument(
        "--password",
        default="admin1234",
        help="Admin password (default: admin1234)",
    )
    parser.add_argument(
        "--make-admin",
        metavar="EMAIL",
        help="Make an existing user an admin by email",
    )

    args = parser.parse_args()

    if args.make_admin:
        asyncio.run(make_user_admin(args.make_admin))
    else:
        asyncio.run(create_admin_user(args.email, args.password))


if __name__ == "__main__":
    main()
