from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.analytics import service
from app.analytics.schemas import CoursePerformanceResponse
from app.exceptions import DomainError, to_http_exception
from shared.models.user import CurrentUser


async def get_course_performance(
    db: AsyncSession, actor: CurrentUser, course_id: uuid.UUID
) -> CoursePerformanceResponse:
    try:
        report = await service.get_course_performance(db, actor, course_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CoursePerformanceResponse.model_validate(report)
