"""
Course performance roll-up.

A pure fold over already-loaded enrollments, assignments, submissions and
grades; ``service.get_course_performance`` does the gathering. Every rate and
average is rounded to two decimals.
"""
from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

COMPLETION_THRESHOLD = 0.8
RECENT_WINDOW = timedelta(days=7)
GRADE_LETTERS = ("A", "B", "C", "D", "F")


@dataclass(frozen=True)
class EnrollmentRecord:
    student_id: uuid.UUID
    enrollment_date: datetime


@dataclass(frozen=True)
class AssignmentRecord:
    id: uuid.UUID
    title: str


@dataclass(frozen=True)
class SubmissionRecord:
    assignment_id: uuid.UUID
    student_id: uuid.UUID
    submitted_at: datetime
    grade_percentage: float | None = None


@dataclass(frozen=True)
class GradeRecord:
    percentage: float
    letter_grade: str | None = None


@dataclass
class AssignmentStats:
    assignment_id: uuid.UUID
    title: str
    total_submissions: int
    submission_rate: float
    average_grade: float


@dataclass
class CoursePerformance:
    course_id: uuid.UUID
    course_title: str
    total_students: int
    total_assignments: int
    total_submissions: int
    completion_rate: float
    submission_rate: float
    average_grade: float
    average_satisfaction: float
    assignment_stats: list[AssignmentStats] = field(default_factory=list)
    recent_activity: dict[str, int] = field(default_factory=dict)
    grade_distribution: dict[str, int] = field(default_factory=dict)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def satisfaction_from_grade(average_grade: float) -> float:
    """Map an average grade (0-100) onto a 1-5 satisfaction proxy."""
    if average_grade >= 70:
        score = 3.0 + ((average_grade - 70) / 30) * 2.0
    else:
        score = (average_grade / 70) * 3.0
    return min(5.0, max(1.0, score))


def compute_performance(
    *,
    course_id: uuid.UUID,
    course_title: str,
    enrollments: list[EnrollmentRecord],
    assignments: list[AssignmentRecord],
    submissions: list[SubmissionRecord],
    grades: list[GradeRecord],
    now: datetime | None = None,
) -> CoursePerformance:
    now = _as_utc(now or datetime.now(timezone.utc))
    since = now - RECENT_WINDOW
    total_students = len(enrollments)
    total_assignments = len(assignments)

    completion_rate = 0.0
    submission_rate = 0.0
    if total_students and total_assignments:
        per_student = Counter(s.student_id for s in submissions)
        completed = sum(
            1 for count in per_student.values() if count >= total_assignments * COMPLETION_THRESHOLD
        )
        completion_rate = completed / total_students * 100
        submission_rate = len(submissions) / (total_students * total_assignments) * 100

    average_grade = 0.0
    average_satisfaction = 0.0
    if grades:
        average_grade = sum(g.percentage or 0 for g in grades) / len(grades)
        average_satisfaction = satisfaction_from_grade(average_grade)

    stats = []
    for assignment in assignments:
        mine = [s for s in submissions if s.assignment_id == assignment.id]
        stats.append(
            AssignmentStats(
                assignment_id=assignment.id,
                title=assignment.title,
                total_submissions=len(mine),
                submission_rate=round(len(mine) / total_students * 100, 2) if total_students else 0.0,
                average_grade=(
                    round(sum(s.grade_percentage or 0 for s in mine) / len(mine), 2) if mine else 0.0
                ),
            )
        )

    distribution = {letter: 0 for letter in GRADE_LETTERS}
    for grade in grades:
        letter = grade.letter_grade or ""
        if letter == "F":
            distribution["F"] += 1
        elif letter[:1] in ("A", "B", "C", "D"):
            distribution[letter[:1]] += 1

    return CoursePerformance(
        course_id=course_id,
        course_title=course_title,
        total_students=total_students,
        total_assignments=total_assignments,
        total_submissions=len(submissions),
        completion_rate=round(completion_rate, 2),
        submission_rate=round(submission_rate, 2),
        average_grade=round(average_grade, 2),
        average_satisfaction=round(average_satisfaction, 2),
        assignment_stats=stats,
        recent_activity={
            "recent_submissions": sum(1 for s in submissions if _as_utc(s.submitted_at) >= since),
            "new_enrollments": sum(1 for e in enrollments if _as_utc(e.enrollment_date) >= since),
        },
        grade_distribution=distribution,
    )
