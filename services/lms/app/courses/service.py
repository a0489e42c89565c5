"""
Courses service — pure business logic, no FastAPI imports.

Handles course CRUD, admin approval and the legacy embedded materials list.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    CourseCodeExistsError,
    CourseNotFoundError,
    MaterialNotFoundError,
    NotCourseOwnerError,
    ValidationError,
)
from app.models.course import Course
from app.models.enums import CourseLevel
from app.notifications.dispatcher import dispatch_to_admins, dispatch_to_user
from shared.events import NotificationEvent, NotificationType
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookups and guards
# ---------------------------------------------------------------------------

async def get_course(db: AsyncSession, course_id: uuid.UUID) -> Course:
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError()
    return course


def can_manage(course: Course, actor: CurrentUser) -> bool:
    return actor.is_admin or course.instructor_id == actor.id


def ensure_can_manage(course: Course, actor: CurrentUser) -> None:
    if not can_manage(course, actor):
        raise NotCourseOwnerError()


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

async def list_courses(
    db: AsyncSession,
    *,
    category: str | None = None,
    level: CourseLevel | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Course], int]:
    """Active courses, newest first."""
    query = select(Course).where(Course.is_active.is_(True))
    if category:
        query = query.where(Course.category == category)
    if level is not None:
        query = query.where(Course.level == level)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Course.title).like(pattern),
                func.lower(Course.description).like(pattern),
                func.lower(Course.course_code).like(pattern),
            )
        )
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    rows = await db.execute(
        query.order_by(Course.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return list(rows.scalars().all()), total or 0


async def list_instructor_courses(db: AsyncSession, instructor_id: uuid.UUID) -> list[Course]:
    rows = await db.execute(
        select(Course)
        .where(Course.instructor_id == instructor_id, Course.is_active.is_(True))
        .order_by(Course.created_at.desc())
    )
    return list(rows.scalars().all())


async def list_pending_courses(db: AsyncSession) -> list[Course]:
    rows = await db.execute(
        select(Course)
        .where(Course.is_approved.is_(False), Course.is_active.is_(True))
        .order_by(Course.created_at.desc())
    )
    return list(rows.scalars().all())


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

async def create_course(db: AsyncSession, instructor_id: uuid.UUID, data: dict) -> Course:
    """Create a course pending admin approval. ``course_code`` is upper-cased."""
    code = data["course_code"].strip().upper()
    existing = await db.scalar(select(Course.id).where(Course.course_code == code))
    if existing is not None:
        raise CourseCodeExistsError()

    course = Course(
        **{**data, "course_code": code},
        instructor_id=instructor_id,
        is_approved=False,
        is_active=True,
        current_enrollment=0,
    )
    db.add(course)
    await db.flush()
    await db.refresh(course)

    await dispatch_to_admins(
        db,
        NotificationEvent(
            type=NotificationType.SYSTEM,
            title="New Course Pending Approval",
            message=f"Course {course.course_code} ({course.title}) is awaiting approval.",
            target_id=course.id,
            target_url="/admin/courses",
            action_required=True,
        ),
    )
    return course


async def update_course(
    db: AsyncSession, course_id: uuid.UUID, actor: CurrentUser, updates: dict
) -> Course:
    course = await get_course(db, course_id)
    ensure_can_manage(course, actor)
    max_students = updates.get("max_students")
    if max_students is not None and max_students < course.current_enrollment:
        raise ValidationError(
            "Maximum students cannot be lower than the current enrollment",
            errors=[{"field": "max_students", "message": f"must be >= {course.current_enrollment}"}],
        )
    for field, value in updates.items():
        setattr(course, field, value)
    await db.flush()
    await db.refresh(course)
    return course


async def approve_course(db: AsyncSession, course_id: uuid.UUID) -> Course:
    course = await get_course(db, course_id)
    course.is_approved = True
    await db.flush()
    await dispatch_to_user(
        db,
        course.instructor_id,
        NotificationEvent(
            type=NotificationType.COURSE_APPROVED,
            title="Course Approved",
            message=f"Your course {course.course_code} ({course.title}) has been approved.",
            target_id=course.id,
            target_url=f"/courses/{course.id}",
        ),
    )
    logger.info("Course %s approved", course.id)
    await db.refresh(course)
    return course


async def deactivate_course(db: AsyncSession, course_id: uuid.UUID, actor: CurrentUser) -> Course:
    course = await get_course(db, course_id)
    ensure_can_manage(course, actor)
    course.is_active = False
    await db.flush()
    await db.refresh(course)
    return course


# ---------------------------------------------------------------------------
# Legacy materials (embedded list on the course row)
# ---------------------------------------------------------------------------

def _find_material(course: Course, material_id: str) -> int:
    for index, material in enumerate(course.materials or []):
        if material.get("id") == material_id:
            return index
    raise MaterialNotFoundError()


async def add_material(
    db: AsyncSession, course_id: uuid.UUID, actor: CurrentUser, data: dict
) -> dict:
    course = await get_course(db, course_id)
    ensure_can_manage(course, actor)
    material = {
        **data,
        "id": str(uuid.uuid4()),
        "upload_date": datetime.now(timezone.utc).isoformat(),
    }
    # Reassign so the JSON column is marked dirty
    course.materials = [*(course.materials or []), material]
    await db.flush()
    return material


async def update_material(
    db: AsyncSession, course_id: uuid.UUID, material_id: str, actor: CurrentUser, updates: dict
) -> dict:
    course = await get_course(db, course_id)
    ensure_can_manage(course, actor)
    index = _find_material(course, material_id)
    materials = list(course.materials)
    materials[index] = {**materials[index], **updates}
    course.materials = materials
    await db.flush()
    return materials[index]


async def delete_material(
    db: AsyncSession, course_id: uuid.UUID, material_id: str, actor: CurrentUser
) -> None:
    course = await get_course(db, course_id)
    ensure_can_manage(course, actor)
    index = _find_material(course, material_id)
    course.materials = [m for i, m in enumerate(course.materials) if i != index]
    await db.flush()
