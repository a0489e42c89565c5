"""
Content hierarchy service — modules and lectures under a course.

Pure business logic, no FastAPI imports. Writes require the course owner or an
admin; reads go through the visibility gate in ``app.content.visibility``.
``order`` is advisory: omitted values append after the highest sibling, and
siblings are never renumbered.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.content.visibility import Viewer, can_access_lecture, is_module_visible
from app.courses.service import ensure_can_manage
from app.enrollment.service import is_enrolled
from app.exceptions import (
    CourseNotFoundError,
    InvalidReferenceError,
    LectureLockedError,
    LectureNotFoundError,
    ModuleNotFoundError,
    ValidationError,
)
from app.models.course import Course
from app.models.lecture import Lecture
from app.models.module import Module
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require_title(title: str | None) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError(
            "Title is required", errors=[{"field": "title", "message": "must not be empty"}]
        )
    return title


def _normalize_resources(resources: list[dict] | None) -> list[dict]:
    """Give every resource an id and drop entries without a URL; reject empty content."""
    normalized = []
    for resource in resources or []:
        url = (resource.get("url") or "").strip()
        if not url:
            continue
        normalized.append(
            {
                "id": resource.get("id") or str(uuid.uuid4()),
                "type": resource.get("type", "link"),
                "url": url,
                "title": resource.get("title"),
                "duration": resource.get("duration") or 0,
            }
        )
    if not normalized:
        raise ValidationError(
            "Lecture content is required",
            errors=[{"field": "resources", "message": "at least one resource with a url"}],
        )
    return normalized


async def _next_order(db: AsyncSession, column, parent_column, parent_id: uuid.UUID) -> int:
    highest = await db.scalar(select(func.max(column)).where(parent_column == parent_id))
    return (highest or 0) + 1


async def resolve_viewer(db: AsyncSession, course: Course, actor: CurrentUser) -> Viewer:
    is_owner = course.instructor_id == actor.id
    enrolled = False
    if not (is_owner or actor.is_admin):
        enrolled = await is_enrolled(db, actor.id, course.id)
    return Viewer(is_owner=is_owner, is_admin=actor.is_admin, is_enrolled=enrolled)


async def _get_course_of_module(db: AsyncSession, module: Module) -> Course:
    course = await db.get(Course, module.course_id)
    if course is None:
        raise ModuleNotFoundError()
    return course


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------

async def get_module(db: AsyncSession, module_id: uuid.UUID) -> Module:
    module = await db.get(Module, module_id)
    if module is None:
        raise ModuleNotFoundError()
    return module


async def get_visible_module(db: AsyncSession, module_id: uuid.UUID, actor: CurrentUser) -> Module:
    """Hidden modules are reported as missing to viewers who cannot see them."""
    module = await get_module(db, module_id)
    course = await _get_course_of_module(db, module)
    viewer = await resolve_viewer(db, course, actor)
    if not is_module_visible(viewer, module.is_published):
        raise ModuleNotFoundError()
    return module


async def create_module(
    db: AsyncSession,
    actor: CurrentUser,
    *,
    course_id: uuid.UUID,
    title: str,
    description: str | None = None,
    order: int | None = None,
) -> Module:
    course = await db.get(Course, course_id)
    if course is None:
        raise InvalidReferenceError(
            "Course not found", errors=[{"field": "course_id", "message": "unknown course"}]
        )
    ensure_can_manage(course, actor)
    title = _require_title(title)
    if order is None:
        order = await _next_order(db, Module.order, Module.course_id, course.id)

    module = Module(
        course_id=course.id,
        title=title,
        description=description,
        order=order,
        is_published=False,
    )
    db.add(module)
    await db.flush()
    await db.refresh(module)
    return module


async def update_module(
    db: AsyncSession, module_id: uuid.UUID, actor: CurrentUser, updates: dict
) -> Module:
    module = await get_module(db, module_id)
    ensure_can_manage(await _get_course_of_module(db, module), actor)
    if "title" in updates:
        updates["title"] = _require_title(updates["title"])
    for field, value in updates.items():
        setattr(module, field, value)
    await db.flush()
    await db.refresh(module)
    return module


async def set_module_published(
    db: AsyncSession, module_id: uuid.UUID, actor: CurrentUser, is_published: bool
) -> Module:
    """Idempotent set; no transition rules."""
    return await update_module(db, module_id, actor, {"is_published": is_published})


async def delete_module(db: AsyncSession, module_id: uuid.UUID, actor: CurrentUser) -> int:
    """Delete a module and all of its lectures together. Returns lectures removed."""
    module = await get_module(db, module_id)
    ensure_can_manage(await _get_course_of_module(db, module), actor)
    result = await db.execute(
        delete(Lecture)
        .where(Lecture.module_id == module.id)
        .execution_options(synchronize_session="fetch")
    )
    await db.delete(module)
    await db.flush()
    removed = result.rowcount or 0
    logger.info("Module %s deleted with %d lecture(s)", module_id, removed)
    return removed


async def list_modules(
    db: AsyncSession,
    actor: CurrentUser,
    *,
    course_id: uuid.UUID | None = None,
    is_published: bool | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Module], int]:
    """Modules ordered by ``order`` then creation time.

    Non-admins only see published modules and the drafts of courses they own.
    """
    query = select(Module)
    if course_id is not None:
        query = query.where(Module.course_id == course_id)
    if is_published is not None:
        query = query.where(Module.is_published.is_(is_published))
    if not actor.is_admin:
        query = query.join(Course, Course.id == Module.course_id).where(
            or_(Module.is_published.is_(True), Course.instructor_id == actor.id)
        )
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    rows = await db.execute(
        query.order_by(Module.order.asc(), Module.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(rows.scalars().all()), total or 0


# ---------------------------------------------------------------------------
# Lectures
# ---------------------------------------------------------------------------

async def get_lecture(db: AsyncSession, lecture_id: uuid.UUID) -> Lecture:
    lecture = await db.get(Lecture, lecture_id)
    if lecture is None:
        raise LectureNotFoundError()
    return lecture


async def _lecture_context(
    db: AsyncSession, lecture: Lecture
) -> tuple[Module, Course]:
    module = await get_module(db, lecture.module_id)
    return module, await _get_course_of_module(db, module)


async def get_accessible_lecture(
    db: AsyncSession, lecture_id: uuid.UUID, actor: CurrentUser
) -> Lecture:
    """Return the lecture with its resources, or raise if the gate is closed."""
    lecture = await get_lecture(db, lecture_id)
    module, course = await _lecture_context(db, lecture)
    viewer = await resolve_viewer(db, course, actor)
    if not is_module_visible(viewer, module.is_published):
        raise LectureNotFoundError()
    if not can_access_lecture(viewer, module.is_published, lecture.is_published):
        raise LectureLockedError()
    return lecture


async def create_lecture(
    db: AsyncSession,
    actor: CurrentUser,
    *,
    module_id: uuid.UUID,
    title: str,
    resources: list[dict],
    description: str | None = None,
    order: int | None = None,
) -> Lecture:
    module = await db.get(Module, module_id)
    if module is None:
        raise InvalidReferenceError(
            "Module not found", errors=[{"field": "module_id", "message": "unknown module"}]
        )
    ensure_can_manage(await _get_course_of_module(db, module), actor)
    title = _require_title(title)
    resources = _normalize_resources(resources)
    if order is None:
        order = await _next_order(db, Lecture.order, Lecture.module_id, module.id)

    lecture = Lecture(
        module_id=module.id,
        title=title,
        description=description,
        order=order,
        resources=resources,
        is_published=False,
    )
    db.add(lecture)
    await db.flush()
    await db.refresh(lecture)
    return lecture


async def update_lecture(
    db: AsyncSession, lecture_id: uuid.UUID, actor: CurrentUser, updates: dict
) -> Lecture:
    lecture = await get_lecture(db, lecture_id)
    _, course = await _lecture_context(db, lecture)
    ensure_can_manage(course, actor)
    if "title" in updates:
        updates["title"] = _require_title(updates["title"])
    if "resources" in updates:
        updates["resources"] = _normalize_resources(updates["resources"])
    for field, value in updates.items():
        setattr(lecture, field, value)
    await db.flush()
    await db.refresh(lecture)
    return lecture


async def set_lecture_published(
    db: AsyncSession, lecture_id: uuid.UUID, actor: CurrentUser, is_published: bool
) -> Lecture:
    return await update_lecture(db, lecture_id, actor, {"is_published": is_published})


async def delete_lecture(db: AsyncSession, lecture_id: uuid.UUID, actor: CurrentUser) -> None:
    lecture = await get_lecture(db, lecture_id)
    _, course = await _lecture_context(db, lecture)
    ensure_can_manage(course, actor)
    await db.delete(lecture)
    await db.flush()


async def list_lectures(
    db: AsyncSession,
    actor: CurrentUser,
    *,
    module_id: uuid.UUID,
    is_published: bool | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[tuple[Lecture, bool]], int]:
    """Lectures of a visible module, each paired with whether the caller may open it."""
    module = await get_module(db, module_id)
    course = await _get_course_of_module(db, module)
    viewer = await resolve_viewer(db, course, actor)
    if not is_module_visible(viewer, module.is_published):
        raise ModuleNotFoundError()

    query = select(Lecture).where(Lecture.module_id == module.id)
    if is_published is not None:
        query = query.where(Lecture.is_published.is_(is_published))
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    rows = await db.execute(
        query.order_by(Lecture.order.asc(), Lecture.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = [
        (lecture, can_access_lecture(viewer, module.is_published, lecture.is_published))
        for lecture in rows.scalars().all()
    ]
    return items, total or 0


# ---------------------------------------------------------------------------
# Course content tree
# ---------------------------------------------------------------------------

async def get_course_content(
    db: AsyncSession, course_id: uuid.UUID, actor: CurrentUser
) -> tuple[Course, Viewer, list[tuple[Module, list[tuple[Lecture, bool]]]]]:
    """Visible modules in order, each with its lectures and per-lecture access."""
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError()
    viewer = await resolve_viewer(db, course, actor)

    modules = (
        await db.execute(
            select(Module)
            .where(Module.course_id == course.id)
            .order_by(Module.order.asc(), Module.created_at.asc())
        )
    ).scalars().all()
    visible = [m for m in modules if is_module_visible(viewer, m.is_published)]

    lectures_by_module: dict[uuid.UUID, list[Lecture]] = {m.id: [] for m in visible}
    if visible:
        lectures = (
            await db.execute(
                select(Lecture)
                .where(Lecture.module_id.in_(list(lectures_by_module)))
                .order_by(Lecture.order.asc(), Lecture.created_at.asc())
            )
        ).scalars().all()
        for lecture in lectures:
            lectures_by_module[lecture.module_id].append(lecture)

    tree = [
        (
            module,
            [
                (lecture, can_access_lecture(viewer, module.is_published, lecture.is_published))
                for lecture in lectures_by_module[module.id]
            ],
        )
        for module in visible
    ]
    return course, viewer, tree
