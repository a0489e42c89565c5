"""Courses — Pydantic V2 request/response schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import CourseLevel, MaterialType


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class CreateCourseRequest(_Request):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    course_code: str = Field(min_length=1, max_length=20)
    credits: int = Field(ge=1, le=10)
    max_students: int = Field(ge=1)
    fees: Decimal = Field(default=Decimal("0"), ge=0)
    category: str = Field(min_length=1, max_length=100)
    level: CourseLevel = CourseLevel.BEGINNER
    prerequisites: list[str] = Field(default_factory=list)


class UpdateCourseRequest(_Request):
    """Partial update; course_code is immutable."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    credits: int | None = Field(default=None, ge=1, le=10)
    max_students: int | None = Field(default=None, ge=1)
    fees: Decimal | None = Field(default=None, ge=0)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    level: CourseLevel | None = None
    prerequisites: list[str] | None = None


class MaterialRequest(_Request):
    title: str = Field(min_length=1, max_length=200)
    type: MaterialType
    url: str = Field(min_length=1, max_length=500)
    filename: str | None = Field(default=None, max_length=255)
    description: str | None = None
    is_free: bool = False


class UpdateMaterialRequest(_Request):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    type: MaterialType | None = None
    url: str | None = Field(default=None, min_length=1, max_length=500)
    filename: str | None = Field(default=None, max_length=255)
    description: str | None = None
    is_free: bool | None = None


class MaterialResponse(BaseModel):
    id: str
    title: str
    type: MaterialType
    url: str
    filename: str | None = None
    description: str | None = None
    is_free: bool = False
    upload_date: datetime


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    course_code: str
    instructor_id: uuid.UUID
    credits: int
    max_students: int
    fees: Decimal
    category: str
    level: CourseLevel
    is_approved: bool
    is_active: bool
    current_enrollment: int
    available_seats: int
    prerequisites: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CourseDetailResponse(CourseResponse):
    materials: list[MaterialResponse] = Field(default_factory=list)


class CourseListResponse(BaseModel):
    courses: list[CourseResponse]
    total: int
    page: int
    limit: int


class CourseCreatedResponse(BaseModel):
    message: str
    course: CourseResponse
