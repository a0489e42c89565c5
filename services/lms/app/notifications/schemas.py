from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from shared.events import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    recipient_id: UUID
    title: str
    message: str
    type: NotificationType
    target_id: UUID | None = None
    target_url: str | None = None
    action_required: bool
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Newest-first notifications for the current user."""

    notifications: list[NotificationResponse]
    unread_count: int = Field(description="Unread, non-deleted notifications.")


class CreateNotificationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    recipient_id: UUID
    title: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=500)
    type: NotificationType = NotificationType.ANNOUNCEMENT
    target_id: UUID | None = None
    target_url: str | None = Field(default=None, max_length=200)
    action_required: bool = False


class MarkAllReadResponse(BaseModel):
    message: str
    updated: int
