from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user, require_instructor_or_admin, require_student
from app.grading import controller
from app.grading.schemas import (
    AssignmentResponse,
    CreateAssignmentRequest,
    GradeRequest,
    GradeResponse,
    PublishAssignmentRequest,
    SubmissionResponse,
    SubmitRequest,
)
from shared.models.user import CurrentUser

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.post(
    "",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an assignment (draft)",
)
async def create_assignment(
    body: CreateAssignmentRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> AssignmentResponse:
    return await controller.create_assignment(db, actor, body)


@router.get("", response_model=list[AssignmentResponse], summary="Assignments of a course")
async def list_assignments(
    course: uuid.UUID = Query(..., description="Course id."),
    actor: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[AssignmentResponse]:
    return await controller.list_assignments(db, actor, course)


@router.patch(
    "/{assignment_id}/publish",
    response_model=AssignmentResponse,
    summary="Publish or unpublish an assignment",
)
async def publish_assignment(
    assignment_id: uuid.UUID,
    body: PublishAssignmentRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> AssignmentResponse:
    return await controller.set_published(db, actor, assignment_id, body.is_published)


@router.post(
    "/{assignment_id}/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an assignment",
)
async def submit(
    assignment_id: uuid.UUID,
    body: SubmitRequest,
    student: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    return await controller.submit(db, student, assignment_id, body)


@router.put(
    "/submissions/{submission_id}/grade",
    response_model=GradeResponse,
    summary="Grade a submission",
)
async def grade_submission(
    submission_id: uuid.UUID,
    body: GradeRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> GradeResponse:
    return await controller.grade(db, actor, submission_id, body)
