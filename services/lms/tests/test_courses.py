from decimal import Decimal

import pytest
from sqlalchemy import select

from app.courses import service
from app.enrollment.service import enroll
from app.exceptions import (
    CourseCodeExistsError,
    MaterialNotFoundError,
    NotCourseOwnerError,
    ValidationError,
)
from app.models.enums import CourseLevel
from app.models.notification import Notification
from shared.constants import Role
from shared.events import NotificationType
from tests.factories import as_current, make_course, make_user


def _course_data(code: str = "cs101") -> dict:
    return {
        "title": "Algorithms",
        "description": "Sorting, searching and graphs.",
        "course_code": code,
        "credits": 4,
        "max_students": 25,
        "fees": Decimal("0"),
        "category": "Computer Science",
        "level": CourseLevel.INTERMEDIATE,
        "prerequisites": [],
    }


@pytest.mark.asyncio
async def test_create_course_is_pending_and_alerts_admins(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    instructor = await make_user(db_session, Role.INSTRUCTOR)

    course = await service.create_course(db_session, instructor.id, _course_data(" cs101 "))

    assert course.course_code == "CS101"
    assert course.is_approved is False
    assert course.current_enrollment == 0
    assert course.available_seats == 25
    alerts = (
        await db_session.execute(select(Notification).where(Notification.recipient_id == admin.id))
    ).scalars().all()
    assert [n.target_id for n in alerts] == [course.id]


@pytest.mark.asyncio
async def test_course_code_is_unique_case_insensitively(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    await service.create_course(db_session, instructor.id, _course_data("cs101"))

    with pytest.raises(CourseCodeExistsError):
        await service.create_course(db_session, instructor.id, _course_data("CS101"))


@pytest.mark.asyncio
async def test_approve_course_notifies_instructor(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    course = await make_course(db_session, instructor, approved=False)
    assert [c.id for c in await service.list_pending_courses(db_session)] == [course.id]

    approved = await service.approve_course(db_session, course.id)

    assert approved.is_approved is True
    assert await service.list_pending_courses(db_session) == []
    types = (
        await db_session.execute(
            select(Notification.type).where(Notification.recipient_id == instructor.id)
        )
    ).scalars().all()
    assert types == [NotificationType.COURSE_APPROVED]


@pytest.mark.asyncio
async def test_update_course_checks_owner_and_capacity(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    stranger = await make_user(db_session, Role.INSTRUCTOR)
    course = await make_course(db_session, instructor, max_students=3)
    for _ in range(2):
        await enroll(db_session, (await make_user(db_session)).id, course.id)

    with pytest.raises(NotCourseOwnerError):
        await service.update_course(db_session, course.id, as_current(stranger), {"title": "Mine"})
    with pytest.raises(ValidationError):
        await service.update_course(db_session, course.id, as_current(instructor), {"max_students": 1})

    updated = await service.update_course(
        db_session, course.id, as_current(instructor), {"max_students": 2, "title": "Renamed"}
    )
    assert (updated.max_students, updated.title, updated.available_seats) == (2, "Renamed", 0)


@pytest.mark.asyncio
async def test_list_courses_filters_and_hides_inactive(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    visible = await make_course(db_session, instructor, code="DATA1")
    await make_course(db_session, instructor, code="GONE1", active=False)

    everything, total = await service.list_courses(db_session)
    assert [c.id for c in everything] == [visible.id]
    assert total == 1

    found, _ = await service.list_courses(db_session, search="data")
    assert [c.id for c in found] == [visible.id]
    none, total = await service.list_courses(db_session, level=CourseLevel.ADVANCED)
    assert none == [] and total == 0


@pytest.mark.asyncio
async def test_deactivate_removes_course_from_listing(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    course = await make_course(db_session, instructor)

    await service.deactivate_course(db_session, course.id, as_current(instructor))

    assert await service.list_instructor_courses(db_session, instructor.id) == []


@pytest.mark.asyncio
async def test_material_lifecycle(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    course = await make_course(db_session, instructor)
    actor = as_current(instructor)

    material = await service.add_material(
        db_session, course.id, actor, {"title": "Syllabus", "type": "pdf", "url": "https://x/s.pdf"}
    )
    assert material["id"] and material["upload_date"]

    changed = await service.update_material(
        db_session, course.id, material["id"], actor, {"title": "Syllabus v2"}
    )
    assert changed["title"] == "Syllabus v2"
    assert changed["url"] == "https://x/s.pdf"

    await service.delete_material(db_session, course.id, material["id"], actor)
    assert course.materials == []
    with pytest.raises(MaterialNotFoundError):
        await service.delete_material(db_session, course.id, material["id"], actor)
