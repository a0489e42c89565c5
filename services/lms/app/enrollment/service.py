"""
Enrollment service — seat accounting for courses.

The capacity check and the counter update are one conditional UPDATE, so two
requests racing for the last seat cannot both succeed: the database evaluates
``current_enrollment < max_students`` at write time, not whatever a stale read
saw earlier. The enrollment row is written in the same transaction (get_db
commits once at the end of the request).
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AccessError,
    AlreadyDroppedError,
    AlreadyEnrolledError,
    CourseFullError,
    CourseNotApprovedError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
)
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

async def get_enrollment(
    db: AsyncSession, student_id: uuid.UUID, course_id: uuid.UUID
) -> Enrollment | None:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.student_id == student_id, Enrollment.course_id == course_id
        )
    )
    return result.scalar_one_or_none()


async def is_enrolled(db: AsyncSession, student_id: uuid.UUID, course_id: uuid.UUID) -> bool:
    found = await db.scalar(
        select(Enrollment.id).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
            Enrollment.status == EnrollmentStatus.ENROLLED,
        )
    )
    return found is not None


async def list_student_enrollments(
    db: AsyncSession, actor: CurrentUser, student_id: uuid.UUID
) -> list[tuple[Enrollment, Course]]:
    if not actor.is_admin and actor.id != student_id:
        raise AccessError("Access denied")
    rows = await db.execute(
        select(Enrollment, Course)
        .join(Course, Course.id == Enrollment.course_id)
        .where(Enrollment.student_id == student_id)
        .order_by(Enrollment.enrollment_date.desc())
    )
    return [(e, c) for e, c in rows.all()]


async def list_course_enrollments(
    db: AsyncSession, actor: CurrentUser, course_id: uuid.UUID
) -> list[Enrollment]:
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError()
    if not actor.is_admin and course.instructor_id != actor.id:
        raise AccessError("Access denied")
    rows = await db.execute(
        select(Enrollment)
        .where(Enrollment.course_id == course.id, Enrollment.status == EnrollmentStatus.ENROLLED)
        .order_by(Enrollment.enrollment_date.asc())
    )
    return list(rows.scalars().all())


# ---------------------------------------------------------------------------
# Seat counter
# ---------------------------------------------------------------------------

async def _reserve_seat(db: AsyncSession, course_id: uuid.UUID) -> bool:
    result = await db.execute(
        update(Course)
        .where(Course.id == course_id, Course.current_enrollment < Course.max_students)
        .values(current_enrollment=Course.current_enrollment + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def _release_seat(db: AsyncSession, course_id: uuid.UUID) -> None:
    await db.execute(
        update(Course)
        .where(Course.id == course_id, Course.current_enrollment > 0)
        .values(current_enrollment=Course.current_enrollment - 1)
        .execution_options(synchronize_session=False)
    )


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

async def enroll(db: AsyncSession, student_id: uuid.UUID, course_id: uuid.UUID) -> Enrollment:
    """Enroll a student. Checks run in order: exists/active, approved, duplicate, capacity."""
    course = await db.get(Course, course_id)
    if course is None or not course.is_active:
        raise CourseNotFoundError()
    if not course.is_approved:
        raise CourseNotApprovedError()

    existing = await get_enrollment(db, student_id, course_id)
    if existing is not None and existing.status == EnrollmentStatus.ENROLLED:
        raise AlreadyEnrolledError()

    if not await _reserve_seat(db, course_id):
        raise CourseFullError()

    now = datetime.now(timezone.utc)
    if existing is not None:
        # Re-enrolling after a drop reuses the row
        existing.status = EnrollmentStatus.ENROLLED
        existing.enrollment_date = now
        existing.dropped_at = None
        enrollment = existing
    else:
        enrollment = Enrollment(
            student_id=student_id,
            course_id=course_id,
            status=EnrollmentStatus.ENROLLED,
            enrollment_date=now,
        )
        db.add(enrollment)
    await db.flush()
    await db.refresh(course)
    await db.refresh(enrollment)
    logger.info(
        "Student %s enrolled in %s (%d/%d)",
        student_id,
        course_id,
        course.current_enrollment,
        course.max_students,
    )
    return enrollment


async def drop(db: AsyncSession, actor: CurrentUser, enrollment_id: uuid.UUID) -> Enrollment:
    """Drop an enrollment and free its seat.

    Students may only drop their own enrollment; instructors only within their
    own courses; admins any.
    """
    enrollment = await db.get(Enrollment, enrollment_id)
    if enrollment is None:
        raise EnrollmentNotFoundError()
    if not actor.is_admin and enrollment.student_id != actor.id:
        course = await db.get(Course, enrollment.course_id)
        if course is None or course.instructor_id != actor.id:
            raise AccessError("Access denied")
    if enrollment.status == EnrollmentStatus.DROPPED:
        raise AlreadyDroppedError()

    enrollment.status = EnrollmentStatus.DROPPED
    enrollment.dropped_at = datetime.now(timezone.utc)
    await db.flush()
    await _release_seat(db, enrollment.course_id)

    course = await db.get(Course, enrollment.course_id)
    if course is not None:
        await db.refresh(course)
    await db.refresh(enrollment)
    logger.info("Enrollment %s dropped by %s", enrollment_id, actor.id)
    return enrollment
