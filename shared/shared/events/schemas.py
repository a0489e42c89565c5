from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationType(str, Enum):
    ASSIGNMENT = "assignment"
    ASSIGNMENT_DUE = "assignment_due"
    GRADE = "grade"
    ENROLLMENT = "enrollment"
    PAYMENT = "payment"
    SYSTEM = "system"
    REMINDER = "reminder"
    ANNOUNCEMENT = "announcement"
    DOC_VERIFIED = "doc_verified"
    DOC_REJECTED = "doc_rejected"
    COURSE_APPROVED = "course_approved"
    COURSE_REJECTED = "course_rejected"
    USER_APPROVED = "user_approved"


class NotificationEvent(BaseModel):
    """Domain event: something a user (or every admin) should be told about."""

    model_config = ConfigDict(extra="forbid")

    type: NotificationType
    title: str = Field(max_length=100)
    message: str = Field(max_length=500)
    target_id: UUID | None = None
    target_url: str | None = Field(default=None, max_length=200)
    action_required: bool = False
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
