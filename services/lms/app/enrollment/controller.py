from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.courses.schemas import CourseResponse
from app.enrollment import service
from app.enrollment.schemas import (
    EnrollmentCreatedResponse,
    EnrollmentResponse,
    EnrollmentWithCourseResponse,
)
from app.exceptions import DomainError, to_http_exception
from shared.models.user import CurrentUser


async def enroll(db: AsyncSession, student: CurrentUser, course_id: uuid.UUID) -> EnrollmentCreatedResponse:
    try:
        enrollment = await service.enroll(db, student.id, course_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return EnrollmentCreatedResponse(
        message="Enrolled successfully",
        enrollment=EnrollmentResponse.model_validate(enrollment),
    )


async def drop(db: AsyncSession, actor: CurrentUser, enrollment_id: uuid.UUID) -> EnrollmentResponse:
    try:
        enrollment = await service.drop(db, actor, enrollment_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return EnrollmentResponse.model_validate(enrollment)


async def list_student_enrollments(
    db: AsyncSession, actor: CurrentUser, student_id: uuid.UUID
) -> list[EnrollmentWithCourseResponse]:
    try:
        rows = await service.list_student_enrollments(db, actor, student_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return [
        EnrollmentWithCourseResponse(
            **EnrollmentResponse.model_validate(enrollment).model_dump(),
            course=CourseResponse.model_validate(course),
        )
        for enrollment, course in rows
    ]


async def list_course_enrollments(
    db: AsyncSession, actor: CurrentUser, course_id: uuid.UUID
) -> list[EnrollmentResponse]:
    try:
        enrollments = await service.list_course_enrollments(db, actor, course_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return [EnrollmentResponse.model_validate(e) for e in enrollments]
