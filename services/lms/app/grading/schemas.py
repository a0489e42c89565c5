from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class CreateAssignmentRequest(_Request):
    course_id: uuid.UUID
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    total_points: int = Field(default=100, ge=1)
    due_date: datetime | None = None


class PublishAssignmentRequest(_Request):
    is_published: bool


class SubmitRequest(_Request):
    content: str | None = None


class GradeRequest(_Request):
    percentage: Decimal = Field(ge=0, le=100)
    feedback: str | None = None


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    course_id: uuid.UUID
    title: str
    description: str | None = None
    total_points: int
    due_date: datetime | None = None
    is_published: bool
    created_at: datetime


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    assignment_id: uuid.UUID
    student_id: uuid.UUID
    content: str | None = None
    submitted_at: datetime
    grade_percentage: Decimal | None = None
    feedback: str | None = None


class GradeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    course_id: uuid.UUID
    student_id: uuid.UUID
    assignment_id: uuid.UUID | None = None
    percentage: Decimal
    letter_grade: str
    created_at: datetime
