"""Assignments, submissions and grades: the inputs of course performance."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.courses.service import can_manage, ensure_can_manage, get_course
from app.enrollment.service import is_enrolled
from app.exceptions import (
    AlreadySubmittedError,
    AssignmentNotFoundError,
    NotEnrolledError,
    SubmissionNotFoundError,
)
from app.models.grading import Assignment, Grade, Submission
from app.notifications.dispatcher import dispatch_to_user
from shared.events import NotificationEvent, NotificationType
from shared.models.user import CurrentUser

_LETTER_THRESHOLDS = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))


def letter_grade(percentage: float | Decimal) -> str:
    for threshold, letter in _LETTER_THRESHOLDS:
        if percentage >= threshold:
            return letter
    return "F"


async def get_assignment(db: AsyncSession, assignment_id: uuid.UUID) -> Assignment:
    assignment = await db.get(Assignment, assignment_id)
    if assignment is None:
        raise AssignmentNotFoundError()
    return assignment


async def create_assignment(
    db: AsyncSession,
    actor: CurrentUser,
    *,
    course_id: uuid.UUID,
    title: str,
    description: str | None = None,
    total_points: int = 100,
    due_date: datetime | None = None,
) -> Assignment:
    course = await get_course(db, course_id)
    ensure_can_manage(course, actor)
    assignment = Assignment(
        course_id=course.id,
        title=title,
        description=description,
        total_points=total_points,
        due_date=due_date,
        is_published=False,
    )
    db.add(assignment)
    await db.flush()
    await db.refresh(assignment)
    return assignment


async def set_assignment_published(
    db: AsyncSession, actor: CurrentUser, assignment_id: uuid.UUID, is_published: bool
) -> Assignment:
    assignment = await get_assignment(db, assignment_id)
    ensure_can_manage(await get_course(db, assignment.course_id), actor)
    assignment.is_published = is_published
    await db.flush()
    await db.refresh(assignment)
    return assignment


async def list_assignments(
    db: AsyncSession, actor: CurrentUser, course_id: uuid.UUID
) -> list[Assignment]:
    course = await get_course(db, course_id)
    query = select(Assignment).where(Assignment.course_id == course.id)
    if not can_manage(course, actor):
        query = query.where(Assignment.is_published.is_(True))
    rows = await db.execute(query.order_by(Assignment.created_at.asc()))
    return list(rows.scalars().all())


async def submit(
    db: AsyncSession, student_id: uuid.UUID, assignment_id: uuid.UUID, content: str | None
) -> Submission:
    assignment = await get_assignment(db, assignment_id)
    if not assignment.is_published:
        raise AssignmentNotFoundError()
    if not await is_enrolled(db, student_id, assignment.course_id):
        raise NotEnrolledError()
    existing = await db.scalar(
        select(Submission.id).where(
            Submission.assignment_id == assignment.id, Submission.student_id == student_id
        )
    )
    if existing is not None:
        raise AlreadySubmittedError()

    submission = Submission(
        assignment_id=assignment.id,
        student_id=student_id,
        content=content,
        submitted_at=datetime.now(timezone.utc),
    )
    db.add(submission)
    await db.flush()
    await db.refresh(submission)
    return submission


async def grade_submission(
    db: AsyncSession,
    actor: CurrentUser,
    submission_id: uuid.UUID,
    percentage: Decimal,
    feedback: str | None = None,
) -> Grade:
    """Grade a submission; regrading replaces the previous grade."""
    submission = await db.get(Submission, submission_id)
    if submission is None:
        raise SubmissionNotFoundError()
    assignment = await get_assignment(db, submission.assignment_id)
    ensure_can_manage(await get_course(db, assignment.course_id), actor)

    submission.grade_percentage = percentage
    submission.feedback = feedback
    grade = await db.scalar(
        select(Grade).where(
            Grade.assignment_id == assignment.id, Grade.student_id == submission.student_id
        )
    )
    if grade is None:
        grade = Grade(
            course_id=assignment.course_id,
            student_id=submission.student_id,
            assignment_id=assignment.id,
            percentage=percentage,
            letter_grade=letter_grade(percentage),
        )
        db.add(grade)
    else:
        grade.percentage = percentage
        grade.letter_grade = letter_grade(percentage)
    await db.flush()

    await dispatch_to_user(
        db,
        submission.student_id,
        NotificationEvent(
            type=NotificationType.GRADE,
            title="Assignment Graded",
            message=f"Your submission for {assignment.title} was graded: {grade.letter_grade}.",
            target_id=assignment.id,
        ),
    )
    await db.refresh(grade)
    return grade
