from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.courses.schemas import CourseResponse
from app.models.enums import EnrollmentStatus


class CreateEnrollmentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    course_id: uuid.UUID


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    student_id: uuid.UUID
    course_id: uuid.UUID
    status: EnrollmentStatus
    enrollment_date: datetime
    dropped_at: datetime | None = None


class EnrollmentWithCourseResponse(EnrollmentResponse):
    course: CourseResponse


class EnrollmentCreatedResponse(BaseModel):
    message: str
    enrollment: EnrollmentResponse
