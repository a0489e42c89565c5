"""
Auth service — pure business logic for registration, login and profiles.

Rules:
  - Zero FastAPI imports.
  - Only flush(); the request-scoped get_db commits.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta, timezone

from jose import jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.utils import hash_password, verify_password
from app.exceptions import (
    AccountDeactivatedError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from app.models.enums import VerificationStatus
from app.models.user import User
from app.notifications.dispatcher import dispatch_to_admins
from shared.constants import Role
from shared.events import NotificationEvent, NotificationType

logger = logging.getLogger(__name__)

SELF_REGISTER_ROLES = frozenset({Role.STUDENT, Role.INSTRUCTOR})
PROFILE_FIELDS = frozenset({"first_name", "last_name", "phone", "date_of_birth", "address"})


# ── User queries ──────────────────────────────────────────────────────────────

async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


# ── Registration / login ──────────────────────────────────────────────────────

async def register_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Role = Role.STUDENT,
    phone: str | None = None,
    date_of_birth: date | None = None,
    qualification: str | None = None,
    experience_years: int | None = None,
    specialization: list[str] | None = None,
    bio: str | None = None,
) -> User:
    """Create a student or instructor account.

    Students are usable immediately. Instructors start unapproved with an
    empty profile in ``pending`` and every active admin is told about them.
    """
    if role not in SELF_REGISTER_ROLES:
        raise ValueError(f"Role {role!r} cannot self-register")
    if await get_user_by_email(db, email) is not None:
        raise UserAlreadyExistsError()

    is_instructor = role == Role.INSTRUCTOR
    user = User(
        email=email.lower(),
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        phone=phone,
        date_of_birth=date_of_birth,
        is_active=True,
        is_approved=not is_instructor,
    )
    if is_instructor:
        user.qualification = qualification
        user.experience_years = experience_years
        user.specialization = list(specialization or [])
        user.bio = bio
        user.documents_uploaded = False
        user.verification_status = VerificationStatus.PENDING
    db.add(user)
    await db.flush()
    await db.refresh(user)

    if is_instructor:
        await dispatch_to_admins(
            db,
            NotificationEvent(
                type=NotificationType.SYSTEM,
                title="New Instructor Registration",
                message=(
                    f"{user.full_name} has registered as an instructor and needs "
                    "to upload verification documents."
                ),
                target_id=user.id,
                target_url="/admin/instructor-verification",
                action_required=True,
            ),
        )
    logger.info("Registered %s %s", role.value, user.id)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    # Same error for unknown email and wrong password
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()
    if not user.is_active:
        raise AccountDeactivatedError("Account is deactivated. Please contact admin.")
    return user


async def record_login(db: AsyncSession, user: User) -> None:
    user.last_login = datetime.now(timezone.utc)
    await db.flush()


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    roles: list[str],
    secret: str,
    algorithm: str,
    issuer: str,
    audience: str,
    expire_seconds: int,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "roles": roles,
        "iat": now,
        "exp": now + timedelta(seconds=expire_seconds),
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


# ── Profile ───────────────────────────────────────────────────────────────────

async def update_profile(db: AsyncSession, user: User, updates: dict) -> User:
    """Apply a partial update restricted to the self-editable profile fields."""
    for field, value in updates.items():
        if field in PROFILE_FIELDS:
            setattr(user, field, value)
    await db.flush()
    await db.refresh(user)
    return user


async def change_password(
    db: AsyncSession, user: User, current_password: str, new_password: str
) -> None:
    if not verify_password(current_password, user.password_hash):
        raise IncorrectPasswordError()
    user.password_hash = hash_password(new_password)
    await db.flush()
