"""Gathers the rows a course performance report is computed from."""
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.analytics.performance import (
    AssignmentRecord,
    CoursePerformance,
    EnrollmentRecord,
    GradeRecord,
    SubmissionRecord,
    compute_performance,
)
from app.courses.service import ensure_can_manage, get_course
from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus
from app.models.grading import Assignment, Grade, Submission
from shared.models.user import CurrentUser


async def get_course_performance(
    db: AsyncSession, actor: CurrentUser, course_id: uuid.UUID
) -> CoursePerformance:
    """Course owner or admin only."""
    course = await get_course(db, course_id)
    ensure_can_manage(course, actor)

    enrollments = (
        await db.execute(
            select(Enrollment).where(
                Enrollment.course_id == course.id,
                Enrollment.status == EnrollmentStatus.ENROLLED,
            )
        )
    ).scalars().all()
    assignments = (
        await db.execute(
            select(Assignment)
            .where(Assignment.course_id == course.id, Assignment.is_published.is_(True))
            .order_by(Assignment.created_at.asc())
        )
    ).scalars().all()

    submissions = []
    active_students = {e.student_id for e in enrollments}
    if assignments and active_students:
        # Dropped students no longer count towards rates
        submissions = (
            await db.execute(
                select(Submission).where(
                    Submission.assignment_id.in_([a.id for a in assignments]),
                    Submission.student_id.in_(list(active_students)),
                )
            )
        ).scalars().all()
    grades = (await db.execute(select(Grade).where(Grade.course_id == course.id))).scalars().all()

    return compute_performance(
        course_id=course.id,
        course_title=course.title,
        enrollments=[EnrollmentRecord(e.student_id, e.enrollment_date) for e in enrollments],
        assignments=[AssignmentRecord(a.id, a.title) for a in assignments],
        submissions=[
            SubmissionRecord(
                s.assignment_id,
                s.student_id,
                s.submitted_at,
                float(s.grade_percentage) if s.grade_percentage is not None else None,
            )
            for s in submissions
        ],
        grades=[GradeRecord(float(g.percentage), g.letter_grade) for g in grades],
    )
