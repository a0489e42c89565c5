from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DomainError, to_http_exception
from app.grading import service
from app.grading.schemas import (
    AssignmentResponse,
    CreateAssignmentRequest,
    GradeRequest,
    GradeResponse,
    SubmissionResponse,
    SubmitRequest,
)
from shared.models.user import CurrentUser


async def create_assignment(
    db: AsyncSession, actor: CurrentUser, body: CreateAssignmentRequest
) -> AssignmentResponse:
    try:
        assignment = await service.create_assignment(db, actor, **body.model_dump())
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return AssignmentResponse.model_validate(assignment)


async def list_assignments(
    db: AsyncSession, actor: CurrentUser, course_id: uuid.UUID
) -> list[AssignmentResponse]:
    try:
        assignments = await service.list_assignments(db, actor, course_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return [AssignmentResponse.model_validate(a) for a in assignments]


async def set_published(
    db: AsyncSession, actor: CurrentUser, assignment_id: uuid.UUID, is_published: bool
) -> AssignmentResponse:
    try:
        assignment = await service.set_assignment_published(db, actor, assignment_id, is_published)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return AssignmentResponse.model_validate(assignment)


async def submit(
    db: AsyncSession, student: CurrentUser, assignment_id: uuid.UUID, body: SubmitRequest
) -> SubmissionResponse:
    try:
        submission = await service.submit(db, student.id, assignment_id, body.content)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return SubmissionResponse.model_validate(submission)


async def grade(
    db: AsyncSession, actor: CurrentUser, submission_id: uuid.UUID, body: GradeRequest
) -> GradeResponse:
    try:
        grade_row = await service.grade_submission(
            db, actor, submission_id, body.percentage, body.feedback
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return GradeResponse.model_validate(grade_row)
