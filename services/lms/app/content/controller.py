"""Content controller — builds gated responses, catches domain exceptions."""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.content import service
from app.content.schemas import (
    CourseContentResponse,
    CreateLectureRequest,
    CreateModuleRequest,
    LectureListResponse,
    LectureResponse,
    ModuleContentResponse,
    ModuleDeletedResponse,
    ModuleListResponse,
    ModuleResponse,
    UpdateLectureRequest,
    UpdateModuleRequest,
)
from app.exceptions import DomainError, to_http_exception
from app.models.lecture import Lecture
from shared.models.user import CurrentUser


def _lecture_response(lecture: Lecture, accessible: bool) -> LectureResponse:
    resources = lecture.resources or []
    return LectureResponse(
        id=lecture.id,
        module_id=lecture.module_id,
        title=lecture.title,
        description=lecture.description,
        order=lecture.order,
        is_published=lecture.is_published,
        locked=not accessible,
        resources=resources if accessible else None,
        total_duration=sum(r.get("duration") or 0 for r in resources),
        created_at=lecture.created_at,
        updated_at=lecture.updated_at,
    )


# ── Modules ───────────────────────────────────────────────────────────────────

async def create_module(db: AsyncSession, actor: CurrentUser, body: CreateModuleRequest) -> ModuleResponse:
    try:
        module = await service.create_module(db, actor, **body.model_dump())
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ModuleResponse.model_validate(module)


async def list_modules(
    db: AsyncSession,
    actor: CurrentUser,
    *,
    course_id: uuid.UUID | None,
    is_published: bool | None,
    page: int,
    limit: int,
) -> ModuleListResponse:
    modules, total = await service.list_modules(
        db, actor, course_id=course_id, is_published=is_published, page=page, limit=limit
    )
    return ModuleListResponse(
        modules=[ModuleResponse.model_validate(m) for m in modules],
        total=total,
        page=page,
        limit=limit,
    )


async def get_module(db: AsyncSession, actor: CurrentUser, module_id: uuid.UUID) -> ModuleResponse:
    try:
        module = await service.get_visible_module(db, module_id, actor)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ModuleResponse.model_validate(module)


async def update_module(
    db: AsyncSession, actor: CurrentUser, module_id: uuid.UUID, body: UpdateModuleRequest
) -> ModuleResponse:
    try:
        module = await service.update_module(db, module_id, actor, body.model_dump(exclude_unset=True))
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ModuleResponse.model_validate(module)


async def set_module_published(
    db: AsyncSession, actor: CurrentUser, module_id: uuid.UUID, is_published: bool
) -> ModuleResponse:
    try:
        module = await service.set_module_published(db, module_id, actor, is_published)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ModuleResponse.model_validate(module)


async def delete_module(db: AsyncSession, actor: CurrentUser, module_id: uuid.UUID) -> ModuleDeletedResponse:
    try:
        removed = await service.delete_module(db, module_id, actor)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ModuleDeletedResponse(message="Module deleted successfully", lectures_deleted=removed)


# ── Lectures ──────────────────────────────────────────────────────────────────

async def create_lecture(db: AsyncSession, actor: CurrentUser, body: CreateLectureRequest) -> LectureResponse:
    try:
        lecture = await service.create_lecture(
            db,
            actor,
            module_id=body.module_id,
            title=body.title,
            description=body.description,
            order=body.order,
            resources=body.resource_dicts() or [],
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return _lecture_response(lecture, accessible=True)


async def list_lectures(
    db: AsyncSession,
    actor: CurrentUser,
    *,
    module_id: uuid.UUID,
    is_published: bool | None,
    page: int,
    limit: int,
) -> LectureListResponse:
    try:
        items, total = await service.list_lectures(
            db, actor, module_id=module_id, is_published=is_published, page=page, limit=limit
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return LectureListResponse(
        lectures=[_lecture_response(lecture, accessible) for lecture, accessible in items],
        total=total,
        page=page,
        limit=limit,
    )


async def get_lecture(db: AsyncSession, actor: CurrentUser, lecture_id: uuid.UUID) -> LectureResponse:
    try:
        lecture = await service.get_accessible_lecture(db, lecture_id, actor)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return _lecture_response(lecture, accessible=True)


async def update_lecture(
    db: AsyncSession, actor: CurrentUser, lecture_id: uuid.UUID, body: UpdateLectureRequest
) -> LectureResponse:
    updates = body.model_dump(
        exclude_unset=True, exclude={"resources", "content_type", "content_url", "duration"}
    )
    resources = body.resource_dicts()
    if resources is not None:
        updates["resources"] = resources
    try:
        lecture = await service.update_lecture(db, lecture_id, actor, updates)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return _lecture_response(lecture, accessible=True)


async def set_lecture_published(
    db: AsyncSession, actor: CurrentUser, lecture_id: uuid.UUID, is_published: bool
) -> LectureResponse:
    try:
        lecture = await service.set_lecture_published(db, lecture_id, actor, is_published)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return _lecture_response(lecture, accessible=True)


async def delete_lecture(db: AsyncSession, actor: CurrentUser, lecture_id: uuid.UUID) -> None:
    try:
        await service.delete_lecture(db, lecture_id, actor)
    except DomainError as exc:
        raise to_http_exception(exc) from exc


# ── Course content tree ───────────────────────────────────────────────────────

async def get_course_content(
    db: AsyncSession, actor: CurrentUser, course_id: uuid.UUID
) -> CourseContentResponse:
    try:
        course, viewer, tree = await service.get_course_content(db, course_id, actor)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    modules = [
        ModuleContentResponse(
            **ModuleResponse.model_validate(module).model_dump(),
            lectures=[_lecture_response(lecture, accessible) for lecture, accessible in lectures],
        )
        for module, lectures in tree
    ]
    return CourseContentResponse(
        course_id=course.id,
        can_edit=viewer.can_edit,
        is_enrolled=viewer.is_enrolled,
        total_modules=len(modules),
        total_lectures=sum(len(m.lectures) for m in modules),
        modules=modules,
    )
