from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DomainError, to_http_exception
from app.notifications import service
from app.notifications.schemas import (
    CreateNotificationRequest,
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from shared.events import NotificationEvent


async def get_notifications(db: AsyncSession, recipient_id: UUID, limit: int) -> NotificationListResponse:
    items, unread_count = await service.list_notifications(db, recipient_id, limit=limit)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        unread_count=unread_count,
    )


async def mark_read(db: AsyncSession, notification_id: UUID, recipient_id: UUID) -> NotificationResponse:
    try:
        notification = await service.mark_read(db, notification_id, recipient_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return NotificationResponse.model_validate(notification)


async def mark_all_read(db: AsyncSession, recipient_id: UUID) -> MarkAllReadResponse:
    updated = await service.mark_all_read(db, recipient_id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


async def delete_notification(db: AsyncSession, notification_id: UUID, recipient_id: UUID) -> None:
    try:
        await service.delete_notification(db, notification_id, recipient_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc


async def create_notification(db: AsyncSession, body: CreateNotificationRequest) -> NotificationResponse:
    event = NotificationEvent(**body.model_dump(exclude={"recipient_id"}))
    notification = await service.create_notification(db, body.recipient_id, event)
    return NotificationResponse.model_validate(notification)
