"""
Auth — Pydantic V2 request/response schemas.

  - *Request  models:  input from the client (strict extra="forbid")
  - *Response models:  output to the client (no write-only fields exposed)
"""
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.enums import VerificationStatus
from shared.constants import Role


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── Requests ──────────────────────────────────────────────────────────────────

class RegisterRequest(_Base):
    """Body for POST /auth/register."""

    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: Role = Role.STUDENT
    phone: str | None = Field(default=None, max_length=30)
    date_of_birth: date | None = None
    # Instructor profile
    qualification: str | None = Field(default=None, max_length=200)
    experience_years: int | None = Field(default=None, ge=0, le=80)
    specialization: list[str] = Field(default_factory=list)
    bio: str | None = Field(default=None, max_length=2000)

    @field_validator("role")
    @classmethod
    def _self_register_role(cls, v: Role) -> Role:
        if v == Role.ADMIN:
            raise ValueError("Role must be student or instructor")
        return v


class LoginRequest(_Base):
    """Body for POST /auth/login."""

    email: EmailStr
    password: str = Field(min_length=1)


class UpdateProfileRequest(_Base):
    """Body for PUT /auth/profile. Only these fields are self-editable."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    date_of_birth: date | None = None
    address: str | None = Field(default=None, max_length=500)


class ChangePasswordRequest(_Base):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)


# ── Responses ─────────────────────────────────────────────────────────────────

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    phone: str | None = None
    date_of_birth: date | None = None
    address: str | None = None
    is_active: bool
    is_approved: bool
    last_login: datetime | None = None
    qualification: str | None = None
    experience_years: int | None = None
    specialization: list[str] = Field(default_factory=list)
    bio: str | None = None
    documents_uploaded: bool = False
    verification_status: VerificationStatus | None = None
    verification_comments: str | None = None
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class RegisterResponse(TokenResponse):
    message: str
    requires_approval: bool
    needs_documents: bool


class MessageResponse(BaseModel):
    message: str
