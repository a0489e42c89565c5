from decimal import Decimal

import pytest

from app.enrollment.service import enroll
from app.exceptions import AlreadySubmittedError, AssignmentNotFoundError, NotEnrolledError
from app.grading import service
from shared.constants import Role
from tests.factories import as_current, make_course, make_user


@pytest.mark.parametrize(
    "percentage, letter",
    [(100, "A"), (90, "A"), (89.99, "B"), (80, "B"), (75, "C"), (60, "D"), (59.5, "F"), (0, "F")],
)
def test_letter_grade_thresholds(percentage: float, letter: str) -> None:
    assert service.letter_grade(percentage) == letter


@pytest.mark.asyncio
async def test_submission_rules(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    student = await make_user(db_session)
    outsider = await make_user(db_session)
    course = await make_course(db_session, instructor)
    owner = as_current(instructor)
    assignment = await service.create_assignment(db_session, owner, course_id=course.id, title="Essay")
    await enroll(db_session, student.id, course.id)

    # Drafts are invisible to students
    with pytest.raises(AssignmentNotFoundError):
        await service.submit(db_session, student.id, assignment.id, "early")
    await service.set_assignment_published(db_session, owner, assignment.id, True)

    with pytest.raises(NotEnrolledError):
        await service.submit(db_session, outsider.id, assignment.id, "hello")
    await service.submit(db_session, student.id, assignment.id, "done")
    with pytest.raises(AlreadySubmittedError):
        await service.submit(db_session, student.id, assignment.id, "again")


@pytest.mark.asyncio
async def test_regrading_replaces_the_grade(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    student = await make_user(db_session)
    course = await make_course(db_session, instructor)
    owner = as_current(instructor)
    assignment = await service.create_assignment(db_session, owner, course_id=course.id, title="Quiz")
    await service.set_assignment_published(db_session, owner, assignment.id, True)
    await enroll(db_session, student.id, course.id)
    submission = await service.submit(db_session, student.id, assignment.id, None)

    first = await service.grade_submission(db_session, owner, submission.id, Decimal("72"))
    second = await service.grade_submission(db_session, owner, submission.id, Decimal("91"))

    assert first.id == second.id
    assert second.letter_grade == "A"
    assert second.percentage == Decimal("91")


@pytest.mark.asyncio
async def test_students_only_list_published_assignments(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    student = await make_user(db_session)
    course = await make_course(db_session, instructor)
    owner = as_current(instructor)
    live = await service.create_assignment(db_session, owner, course_id=course.id, title="Live")
    await service.create_assignment(db_session, owner, course_id=course.id, title="Draft")
    await service.set_assignment_published(db_session, owner, live.id, True)

    assert [a.title for a in await service.list_assignments(db_session, as_current(student), course.id)] == [
        "Live"
    ]
    assert len(await service.list_assignments(db_session, owner, course.id)) == 2
