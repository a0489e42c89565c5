from __future__ import annotations

from pydantic import BaseModel

from app.auth.schemas import UserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int
    page: int
    limit: int


class UserActionResponse(BaseModel):
    message: str
    user: UserResponse
