"""
Notification dispatch — turns domain events into recipient rows.

Delivery is best-effort: every row is written inside its own SAVEPOINT, so a
failing write is logged and skipped without aborting the caller's transaction.
No retries; an admin whose row fails simply misses that notification.
"""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification
from app.models.user import User
from shared.constants import Role
from shared.events import NotificationEvent

logger = logging.getLogger(__name__)


async def _write(
    db: AsyncSession, recipient_id: UUID, event: NotificationEvent
) -> Notification | None:
    notification = Notification(
        recipient_id=recipient_id,
        title=event.title,
        message=event.message,
        type=event.type,
        target_id=event.target_id,
        target_url=event.target_url,
        action_required=event.action_required,
        created_at=event.occurred_at,
    )
    try:
        async with db.begin_nested():
            db.add(notification)
    except SQLAlchemyError:
        logger.warning(
            "Notification %s to %s not delivered", event.type.value, recipient_id, exc_info=True
        )
        return None
    return notification


async def dispatch_to_user(
    db: AsyncSession, recipient_id: UUID, event: NotificationEvent
) -> Notification | None:
    return await _write(db, recipient_id, event)


async def active_admin_ids(db: AsyncSession) -> list[UUID]:
    result = await db.execute(
        select(User.id).where(User.role == Role.ADMIN, User.is_active.is_(True))
    )
    return list(result.scalars().all())


async def dispatch_to_admins(db: AsyncSession, event: NotificationEvent) -> int:
    """Fan an event out to every active admin. Returns the number delivered."""
    delivered = 0
    for admin_id in await active_admin_ids(db):
        if await _write(db, admin_id, event) is not None:
            delivered += 1
    logger.info("Dispatched %s to %d admin(s)", event.type.value, delivered)
    return delivered
