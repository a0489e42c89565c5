"""Admin user management — listing, approval and deactivation."""
from __future__ import annotations

import logging
import uuid

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UserNotFoundError, ValidationError
from app.models.enums import VerificationStatus
from app.models.user import User
from app.notifications.dispatcher import dispatch_to_user
from shared.constants import Role
from shared.events import NotificationEvent, NotificationType

logger = logging.getLogger(__name__)


async def _get_user_or_404(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


async def list_users(
    db: AsyncSession, *, role: Role | None, page: int, limit: int
) -> tuple[list[User], int]:
    query = sa.select(User)
    if role is not None:
        query = query.where(User.role == role)
    total = await db.scalar(sa.select(sa.func.count()).select_from(query.subquery()))
    rows = await db.execute(
        query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return list(rows.scalars().all()), total or 0


async def list_pending_approval(db: AsyncSession) -> list[User]:
    """Active, unapproved accounts that need an admin (students never do)."""
    rows = await db.execute(
        sa.select(User)
        .where(
            User.role != Role.STUDENT,
            User.is_approved.is_(False),
            User.is_active.is_(True),
        )
        .order_by(User.created_at.desc())
    )
    return list(rows.scalars().all())


async def get_user_profile(db: AsyncSession, user_id: uuid.UUID) -> User:
    return await _get_user_or_404(db, user_id)


async def approve_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await _get_user_or_404(db, user_id)
    if not user.is_active:
        raise ValidationError("Cannot approve a deactivated account")
    user.is_approved = True
    if user.role == Role.INSTRUCTOR:
        user.verification_status = VerificationStatus.APPROVED
    await db.flush()

    await dispatch_to_user(
        db,
        user.id,
        NotificationEvent(
            type=NotificationType.USER_APPROVED,
            title="Account Approved",
            message="Your account has been approved by an administrator.",
            target_url="/dashboard",
        ),
    )
    logger.info("User %s approved", user.id)
    await db.refresh(user)
    return user


async def deactivate_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await _get_user_or_404(db, user_id)
    user.is_active = False
    await db.flush()
    await db.refresh(user)
    logger.info("User %s deactivated", user.id)
    return user
