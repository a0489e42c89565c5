from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user, require_student
from app.enrollment import controller
from app.enrollment.schemas import (
    CreateEnrollmentRequest,
    EnrollmentCreatedResponse,
    EnrollmentResponse,
    EnrollmentWithCourseResponse,
)
from shared.models.user import CurrentUser

router = APIRouter(prefix="/enrollments", tags=["Enrollments"])


@router.post(
    "",
    response_model=EnrollmentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in a course",
    description="Fails with 400 'Course is full' once every seat is taken.",
)
async def enroll(
    body: CreateEnrollmentRequest,
    student: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentCreatedResponse:
    return await controller.enroll(db, student, body.course_id)


@router.get(
    "/student/{student_id}",
    response_model=list[EnrollmentWithCourseResponse],
    summary="A student's enrollments",
)
async def list_student_enrollments(
    student_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EnrollmentWithCourseResponse]:
    return await controller.list_student_enrollments(db, current_user, student_id)


@router.get(
    "/course/{course_id}",
    response_model=list[EnrollmentResponse],
    summary="Active enrollments of a course",
)
async def list_course_enrollments(
    course_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EnrollmentResponse]:
    return await controller.list_course_enrollments(db, current_user, course_id)


@router.delete(
    "/{enrollment_id}",
    response_model=EnrollmentResponse,
    summary="Drop an enrollment",
)
async def drop(
    enrollment_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    return await controller.drop(db, current_user, enrollment_id)
