#!/usr/bin/env python3
"""
Create an admin account for the LMS.

Reads credentials from .env:
    ADMIN_EMAIL       admin account email (required)
    ADMIN_PASSWORD    admin account password (required)
    ADMIN_FIRST_NAME  optional, defaults to "System"
    ADMIN_LAST_NAME   optional, defaults to "Admin"

Admins cannot self-register through the API; this is the only way in.

Usage:
    cd lms-backend
    python -m scripts.create_admin
"""
from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Add backend root to path so imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "services" / "lms"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "shared"))

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.auth.utils import hash_password
from app.models.user import User
from shared.constants import Role


async def main() -> None:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        print("Error: ADMIN_EMAIL and ADMIN_PASSWORD must be set in .env")
        sys.exit(1)
    db_url = os.environ["LMS_DATABASE_URL"]

    engine = create_async_engine(db_url, echo=False)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        result = await session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        existing = result.scalar_one_or_none()

        if existing is not None:
            print(f"User {email} already exists (id={existing.id}).")
            if existing.role != Role.ADMIN:
                existing.role = Role.ADMIN
                existing.is_approved = True
                existing.is_active = True
                await session.commit()
                print("  -> Promoted to admin.")
            else:
                print("  -> Already an admin. Nothing to do.")
            await engine.dispose()
            return

        user = User(
            email=email.lower(),
            password_hash=hash_password(password),
            first_name=os.getenv("ADMIN_FIRST_NAME", "System"),
            last_name=os.getenv("ADMIN_LAST_NAME", "Admin"),
            role=Role.ADMIN,
            is_active=True,
            is_approved=True,
        )
        session.add(user)
        await session.commit()
        print(f"Admin created: {email} (id={user.id})")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
