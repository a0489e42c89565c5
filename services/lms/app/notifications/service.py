from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AccessError, NotificationNotFoundError
from app.models.notification import Notification
from shared.events import NotificationEvent

DEFAULT_LIST_LIMIT = 50


def _visible_to(recipient_id: UUID):
    return (
        Notification.recipient_id == recipient_id,
        Notification.is_deleted.is_(False),
    )


async def list_notifications(
    db: AsyncSession, recipient_id: UUID, *, limit: int = DEFAULT_LIST_LIMIT
) -> tuple[list[Notification], int]:
    """Newest first, soft-deleted excluded. Returns (items, unread_count)."""
    rows = await db.execute(
        select(Notification)
        .where(*_visible_to(recipient_id))
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    items = list(rows.scalars().all())
    unread_count = await db.scalar(
        select(func.count())
        .select_from(Notification)
        .where(*_visible_to(recipient_id), Notification.is_read.is_(False))
    )
    return items, unread_count or 0


async def _get_owned(db: AsyncSession, notification_id: UUID, recipient_id: UUID) -> Notification:
    notification = await db.get(Notification, notification_id)
    if notification is None or notification.is_deleted:
        raise NotificationNotFoundError()
    if notification.recipient_id != recipient_id:
        raise AccessError("Not authorized")
    return notification


async def mark_read(db: AsyncSession, notification_id: UUID, recipient_id: UUID) -> Notification:
    notification = await _get_owned(db, notification_id, recipient_id)
    notification.is_read = True
    await db.flush()
    await db.refresh(notification)
    return notification


async def mark_all_read(db: AsyncSession, recipient_id: UUID) -> int:
    result = await db.execute(
        update(Notification)
        .where(*_visible_to(recipient_id), Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


async def delete_notification(db: AsyncSession, notification_id: UUID, recipient_id: UUID) -> None:
    notification = await _get_owned(db, notification_id, recipient_id)
    notification.is_deleted = True
    await db.flush()


async def create_notification(
    db: AsyncSession, recipient_id: UUID, event: NotificationEvent
) -> Notification:
    """Direct (non best-effort) write used by the admin announcement endpoint."""
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
    db.add(notification)
    await db.flush()
    await db.refresh(notification)
    return notification
