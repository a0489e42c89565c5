"""Courses controller — maps service results to responses, catches domain exceptions."""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.courses import service
from app.courses.schemas import (
    CourseCreatedResponse,
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
    CreateCourseRequest,
    MaterialRequest,
    MaterialResponse,
    UpdateCourseRequest,
    UpdateMaterialRequest,
)
from app.exceptions import DomainError, to_http_exception
from app.models.enums import CourseLevel
from shared.models.user import CurrentUser


async def list_courses(
    db: AsyncSession,
    *,
    category: str | None,
    level: CourseLevel | None,
    search: str | None,
    page: int,
    limit: int,
) -> CourseListResponse:
    courses, total = await service.list_courses(
        db, category=category, level=level, search=search, page=page, limit=limit
    )
    return CourseListResponse(
        courses=[CourseResponse.model_validate(c) for c in courses],
        total=total,
        page=page,
        limit=limit,
    )


async def get_course(db: AsyncSession, course_id: uuid.UUID) -> CourseDetailResponse:
    try:
        course = await service.get_course(db, course_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CourseDetailResponse.model_validate(course)


async def list_instructor_courses(db: AsyncSession, instructor_id: uuid.UUID) -> list[CourseResponse]:
    courses = await service.list_instructor_courses(db, instructor_id)
    return [CourseResponse.model_validate(c) for c in courses]


async def list_pending_courses(db: AsyncSession) -> list[CourseResponse]:
    return [CourseResponse.model_validate(c) for c in await service.list_pending_courses(db)]


async def create_course(
    db: AsyncSession, instructor: CurrentUser, body: CreateCourseRequest
) -> CourseCreatedResponse:
    try:
        course = await service.create_course(db, instructor.id, body.model_dump())
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CourseCreatedResponse(
        message="Course created successfully. Pending admin approval.",
        course=CourseResponse.model_validate(course),
    )


async def update_course(
    db: AsyncSession, course_id: uuid.UUID, actor: CurrentUser, body: UpdateCourseRequest
) -> CourseResponse:
    try:
        course = await service.update_course(
            db, course_id, actor, body.model_dump(exclude_unset=True)
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CourseResponse.model_validate(course)


async def approve_course(db: AsyncSession, course_id: uuid.UUID) -> CourseResponse:
    try:
        course = await service.approve_course(db, course_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CourseResponse.model_validate(course)


async def deactivate_course(db: AsyncSession, course_id: uuid.UUID, actor: CurrentUser) -> CourseResponse:
    try:
        course = await service.deactivate_course(db, course_id, actor)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CourseResponse.model_validate(course)


async def add_material(
    db: AsyncSession, course_id: uuid.UUID, actor: CurrentUser, body: MaterialRequest
) -> MaterialResponse:
    try:
        material = await service.add_material(db, course_id, actor, body.model_dump(mode="json"))
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return MaterialResponse.model_validate(material)


async def update_material(
    db: AsyncSession,
    course_id: uuid.UUID,
    material_id: str,
    actor: CurrentUser,
    body: UpdateMaterialRequest,
) -> MaterialResponse:
    try:
        material = await service.update_material(
            db, course_id, material_id, actor, body.model_dump(mode="json", exclude_unset=True)
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return MaterialResponse.model_validate(material)


async def delete_material(
    db: AsyncSession, course_id: uuid.UUID, material_id: str, actor: CurrentUser
) -> None:
    try:
        await service.delete_material(db, course_id, material_id, actor)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
