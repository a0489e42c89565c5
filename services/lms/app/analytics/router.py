from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.analytics import controller
from app.analytics.schemas import CoursePerformanceResponse
from app.database import get_db
from app.dependencies import require_instructor_or_admin
from shared.models.user import CurrentUser

router = APIRouter(prefix="/courses", tags=["Analytics"])


@router.get(
    "/{course_id}/performance",
    response_model=CoursePerformanceResponse,
    summary="Course performance report",
    description="Completion, submission and grade aggregates. Course owner or admin only.",
)
async def get_course_performance(
    course_id: uuid.UUID,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> CoursePerformanceResponse:
    return await controller.get_course_performance(db, actor, course_id)
