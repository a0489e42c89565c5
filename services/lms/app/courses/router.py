"""Courses router — HTTP layer only."""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.courses import controller
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
from app.database import get_db
from app.dependencies import (
    get_current_user,
    require_admin,
    require_approved_instructor,
    require_instructor_or_admin,
)
from app.models.enums import CourseLevel
from shared.models import CurrentUser, PaginationParams

router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get("", response_model=CourseListResponse, summary="Browse active courses")
async def list_courses(
    category: str | None = Query(None),
    level: CourseLevel | None = Query(None),
    search: str | None = Query(None, max_length=100),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> CourseListResponse:
    return await controller.list_courses(
        db, category=category, level=level, search=search,
        page=pagination.page, limit=pagination.limit,
    )


@router.get("/pending", response_model=list[CourseResponse], summary="Courses awaiting approval")
async def list_pending_courses(
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[CourseResponse]:
    return await controller.list_pending_courses(db)


@router.get(
    "/instructor/{instructor_id}",
    response_model=list[CourseResponse],
    summary="Active courses taught by an instructor",
)
async def list_instructor_courses(
    instructor_id: uuid.UUID,
    _user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[CourseResponse]:
    return await controller.list_instructor_courses(db, instructor_id)


@router.get("/{course_id}", response_model=CourseDetailResponse, summary="Course detail")
async def get_course(
    course_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> CourseDetailResponse:
    return await controller.get_course(db, course_id)


@router.post(
    "",
    response_model=CourseCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course",
    description="Approved instructors only. The course starts pending admin approval.",
)
async def create_course(
    body: CreateCourseRequest,
    instructor: CurrentUser = Depends(require_approved_instructor),
    db: AsyncSession = Depends(get_db),
) -> CourseCreatedResponse:
    return await controller.create_course(db, instructor, body)


@router.put("/{course_id}", response_model=CourseResponse, summary="Update a course")
async def update_course(
    course_id: uuid.UUID,
    body: UpdateCourseRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.update_course(db, course_id, actor, body)


@router.put("/{course_id}/approve", response_model=CourseResponse, summary="Approve a course")
async def approve_course(
    course_id: uuid.UUID,
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.approve_course(db, course_id)


@router.put("/{course_id}/deactivate", response_model=CourseResponse, summary="Deactivate a course")
async def deactivate_course(
    course_id: uuid.UUID,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.deactivate_course(db, course_id, actor)


@router.post(
    "/{course_id}/materials",
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach a material to a course",
)
async def add_material(
    course_id: uuid.UUID,
    body: MaterialRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> MaterialResponse:
    return await controller.add_material(db, course_id, actor, body)


@router.put(
    "/{course_id}/materials/{material_id}",
    response_model=MaterialResponse,
    summary="Update a course material",
)
async def update_material(
    course_id: uuid.UUID,
    material_id: str,
    body: UpdateMaterialRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> MaterialResponse:
    return await controller.update_material(db, course_id, material_id, actor, body)


@router.delete(
    "/{course_id}/materials/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a course material",
)
async def delete_material(
    course_id: uuid.UUID,
    material_id: str,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_material(db, course_id, material_id, actor)
