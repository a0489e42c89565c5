"""
Content router — modules, lectures and the gated course content tree.

HTTP layer only; delegates to the controller.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.content import controller
from app.content.schemas import (
    CourseContentResponse,
    CreateLectureRequest,
    CreateModuleRequest,
    LectureListResponse,
    LectureResponse,
    ModuleDeletedResponse,
    ModuleListResponse,
    ModuleResponse,
    PublishRequest,
    UpdateLectureRequest,
    UpdateModuleRequest,
)
from app.database import get_db
from app.dependencies import get_current_user, require_instructor_or_admin
from shared.models import CurrentUser, PaginationParams

router = APIRouter(tags=["Content"])


# ======================================================================
# Modules
# ======================================================================


@router.post(
    "/modules",
    response_model=ModuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a module",
    description="Created as a draft. When ``order`` is omitted the module is appended last.",
)
async def create_module(
    body: CreateModuleRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> ModuleResponse:
    return await controller.create_module(db, actor, body)


@router.get("/modules", response_model=ModuleListResponse, summary="List modules")
async def list_modules(
    course: uuid.UUID | None = Query(None, description="Filter by course id."),
    is_published: bool | None = Query(None),
    pagination: PaginationParams = Depends(),
    actor: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ModuleListResponse:
    return await controller.list_modules(
        db, actor, course_id=course, is_published=is_published,
        page=pagination.page, limit=pagination.limit,
    )


@router.get("/modules/{module_id}", response_model=ModuleResponse, summary="Get a module")
async def get_module(
    module_id: uuid.UUID,
    actor: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ModuleResponse:
    return await controller.get_module(db, actor, module_id)


@router.put("/modules/{module_id}", response_model=ModuleResponse, summary="Update a module")
async def update_module(
    module_id: uuid.UUID,
    body: UpdateModuleRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> ModuleResponse:
    return await controller.update_module(db, actor, module_id, body)


@router.delete(
    "/modules/{module_id}",
    response_model=ModuleDeletedResponse,
    summary="Delete a module and its lectures",
)
async def delete_module(
    module_id: uuid.UUID,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> ModuleDeletedResponse:
    return await controller.delete_module(db, actor, module_id)


@router.patch(
    "/modules/{module_id}/publish",
    response_model=ModuleResponse,
    summary="Publish or unpublish a module",
)
async def publish_module(
    module_id: uuid.UUID,
    body: PublishRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> ModuleResponse:
    return await controller.set_module_published(db, actor, module_id, body.is_published)


# ======================================================================
# Lectures
# ======================================================================


@router.post(
    "/lectures",
    response_model=LectureResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a lecture",
)
async def create_lecture(
    body: CreateLectureRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> LectureResponse:
    return await controller.create_lecture(db, actor, body)


@router.get(
    "/lectures",
    response_model=LectureListResponse,
    summary="List lectures of a module",
    description="Resources are omitted for lectures the caller cannot open.",
)
async def list_lectures(
    module: uuid.UUID = Query(..., description="Module id."),
    is_published: bool | None = Query(None),
    pagination: PaginationParams = Depends(),
    actor: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> LectureListResponse:
    return await controller.list_lectures(
        db, actor, module_id=module, is_published=is_published,
        page=pagination.page, limit=pagination.limit,
    )


@router.get("/lectures/{lecture_id}", response_model=LectureResponse, summary="Open a lecture")
async def get_lecture(
    lecture_id: uuid.UUID,
    actor: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> LectureResponse:
    return await controller.get_lecture(db, actor, lecture_id)


@router.post("/lectures/{lecture_id}", response_model=LectureResponse, summary="Update a lecture")
async def update_lecture(
    lecture_id: uuid.UUID,
    body: UpdateLectureRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> LectureResponse:
    return await controller.update_lecture(db, actor, lecture_id, body)


@router.post(
    "/lectures/{lecture_id}/delete",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a lecture",
)
async def delete_lecture(
    lecture_id: uuid.UUID,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_lecture(db, actor, lecture_id)


@router.post(
    "/lectures/{lecture_id}/publish",
    response_model=LectureResponse,
    summary="Publish or unpublish a lecture",
)
async def publish_lecture(
    lecture_id: uuid.UUID,
    body: PublishRequest,
    actor: CurrentUser = Depends(require_instructor_or_admin),
    db: AsyncSession = Depends(get_db),
) -> LectureResponse:
    return await controller.set_lecture_published(db, actor, lecture_id, body.is_published)


# ======================================================================
# Course content tree
# ======================================================================


@router.get(
    "/courses/{course_id}/content",
    response_model=CourseContentResponse,
    summary="Course modules and lectures as the caller may see them",
)
async def get_course_content(
    course_id: uuid.UUID,
    actor: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CourseContentResponse:
    return await controller.get_course_content(db, actor, course_id)
