"""Admin user-management routes."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import UserResponse
from app.database import get_db
from app.dependencies import require_admin
from app.users import controller
from app.users.schemas import UserActionResponse, UserListResponse
from shared.constants import Role
from shared.models import CurrentUser, PaginationParams

router = APIRouter(prefix="/users", tags=["Users (admin)"])


@router.get("", response_model=UserListResponse, summary="List users")
async def list_users(
    role: Role | None = Query(None, description="Filter by role."),
    pagination: PaginationParams = Depends(),
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    return await controller.list_users(db, role, pagination.page, pagination.limit)


@router.get(
    "/pending-approval",
    response_model=list[UserResponse],
    summary="Active accounts awaiting approval",
)
async def pending_approval(
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    return await controller.pending_approval(db)


@router.get("/{user_id}/profile", response_model=UserResponse, summary="User profile")
async def get_profile(
    user_id: uuid.UUID,
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return await controller.get_profile(db, user_id)


@router.put("/{user_id}/approve", response_model=UserActionResponse, summary="Approve a user")
async def approve_user(
    user_id: uuid.UUID,
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> UserActionResponse:
    return await controller.approve_user(db, user_id)


@router.put("/{user_id}/deactivate", response_model=UserActionResponse, summary="Deactivate a user")
async def deactivate_user(
    user_id: uuid.UUID,
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> UserActionResponse:
    return await controller.deactivate_user(db, user_id)
