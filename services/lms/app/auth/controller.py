"""Auth controller — orchestrates service calls and maps domain errors to HTTP."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import service
from app.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)
from app.config import Settings
from app.exceptions import DomainError, to_http_exception
from app.models.user import User
from shared.constants import Role
from shared.models.user import CurrentUser


def _issue_token(user: User, settings: Settings) -> str:
    return service.create_access_token(
        user.id,
        user.email,
        [user.role.value],
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expire_seconds=settings.jwt_expire_seconds,
    )


async def register(db: AsyncSession, body: RegisterRequest, settings: Settings) -> RegisterResponse:
    try:
        user = await service.register_user(db, **body.model_dump())
    except DomainError as exc:
        raise to_http_exception(exc) from exc

    is_instructor = user.role == Role.INSTRUCTOR
    message = (
        "Instructor registered successfully. Please upload your verification documents."
        if is_instructor
        else "User registered successfully"
    )
    return RegisterResponse(
        access_token=_issue_token(user, settings),
        user=UserResponse.model_validate(user),
        message=message,
        requires_approval=is_instructor,
        needs_documents=is_instructor,
    )


async def login(db: AsyncSession, body: LoginRequest, settings: Settings) -> TokenResponse:
    try:
        user = await service.authenticate_user(db, body.email, body.password)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    await service.record_login(db, user)
    return TokenResponse(
        access_token=_issue_token(user, settings),
        user=UserResponse.model_validate(user),
    )


async def me(db: AsyncSession, current_user: CurrentUser) -> UserResponse:
    try:
        user = await service.get_user_by_id(db, current_user.id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UserResponse.model_validate(user)


async def update_profile(
    db: AsyncSession, current_user: CurrentUser, body: UpdateProfileRequest
) -> UserResponse:
    try:
        user = await service.get_user_by_id(db, current_user.id)
        user = await service.update_profile(db, user, body.model_dump(exclude_unset=True))
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UserResponse.model_validate(user)


async def change_password(
    db: AsyncSession, current_user: CurrentUser, body: ChangePasswordRequest
) -> MessageResponse:
    try:
        user = await service.get_user_by_id(db, current_user.id)
        await service.change_password(db, user, body.current_password, body.new_password)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Password changed successfully")
