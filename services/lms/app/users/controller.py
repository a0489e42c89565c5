from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import UserResponse
from app.exceptions import DomainError, to_http_exception
from app.users import service
from app.users.schemas import UserActionResponse, UserListResponse
from shared.constants import Role


async def list_users(db: AsyncSession, role: Role | None, page: int, limit: int) -> UserListResponse:
    users, total = await service.list_users(db, role=role, page=page, limit=limit)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users], total=total, page=page, limit=limit
    )


async def pending_approval(db: AsyncSession) -> list[UserResponse]:
    return [UserResponse.model_validate(u) for u in await service.list_pending_approval(db)]


async def get_profile(db: AsyncSession, user_id: uuid.UUID) -> UserResponse:
    try:
        user = await service.get_user_profile(db, user_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UserResponse.model_validate(user)


async def approve_user(db: AsyncSession, user_id: uuid.UUID) -> UserActionResponse:
    try:
        user = await service.approve_user(db, user_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UserActionResponse(message="User approved successfully", user=UserResponse.model_validate(user))


async def deactivate_user(db: AsyncSession, user_id: uuid.UUID) -> UserActionResponse:
    try:
        user = await service.deactivate_user(db, user_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UserActionResponse(message="User deactivated successfully", user=UserResponse.model_validate(user))
