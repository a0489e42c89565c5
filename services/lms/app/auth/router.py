"""
Auth router — HTTP concerns only (routes, status codes, dependencies).
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import controller
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
from app.config import Settings, get_settings
from app.database import get_db
from app.dependencies import get_current_user
from app.rate_limit import limiter
from shared.models.user import CurrentUser

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a student or instructor account",
)
@limiter.limit("10/hour")
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RegisterResponse:
    return await controller.register(db, body, settings)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email + password",
)
@limiter.limit("10/minute")
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    return await controller.login(db, body, settings)


@router.get("/me", response_model=UserResponse, summary="Current user")
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return await controller.me(db, current_user)


@router.put("/profile", response_model=UserResponse, summary="Update own profile")
async def update_profile(
    body: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return await controller.update_profile(db, current_user, body)


@router.put("/change-password", response_model=MessageResponse, summary="Change own password")
async def change_password(
    body: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    return await controller.change_password(db, current_user, body)
