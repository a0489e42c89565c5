"""Content hierarchy — Pydantic V2 request/response schemas."""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import ResourceType


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── Modules ───────────────────────────────────────────────────────────────────

class CreateModuleRequest(_Request):
    course_id: uuid.UUID
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    order: int | None = Field(default=None, ge=1, description="Appended last when omitted.")


class UpdateModuleRequest(_Request):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    order: int | None = Field(default=None, ge=1)


class PublishRequest(_Request):
    is_published: bool


class ModuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    course_id: uuid.UUID
    title: str
    description: str | None = None
    order: int
    is_published: bool
    created_at: datetime
    updated_at: datetime


class ModuleListResponse(BaseModel):
    modules: list[ModuleResponse]
    total: int
    page: int
    limit: int


class ModuleDeletedResponse(BaseModel):
    message: str
    lectures_deleted: int


# ── Lectures ──────────────────────────────────────────────────────────────────

class ResourceIn(_Request):
    type: ResourceType = ResourceType.VIDEO
    url: str = Field(min_length=1, max_length=500)
    title: str | None = Field(default=None, max_length=200)
    duration: int = Field(default=0, ge=0, description="Minutes.")


class _LectureContent(_Request):
    """Accepts the resource list or the older single-content fields.

    ``content_type``/``content_url``/``duration`` are folded into a one-element
    ``resources`` list so the rest of the service only sees resources.
    """

    resources: list[ResourceIn] | None = None
    content_type: ResourceType | None = None
    content_url: str | None = Field(default=None, max_length=500)
    duration: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _fold_single_content(self):
        if self.content_url:
            single = ResourceIn(
                type=self.content_type or ResourceType.VIDEO,
                url=self.content_url,
                duration=self.duration or 0,
            )
            self.resources = [single, *(self.resources or [])]
        return self

    def resource_dicts(self) -> list[dict] | None:
        if self.resources is None:
            return None
        return [r.model_dump(mode="json") for r in self.resources]


class CreateLectureRequest(_LectureContent):
    module_id: uuid.UUID
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    order: int | None = Field(default=None, ge=1)


class UpdateLectureRequest(_LectureContent):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    order: int | None = Field(default=None, ge=1)


class ResourceResponse(BaseModel):
    id: str
    type: ResourceType
    url: str
    title: str | None = None
    duration: int = 0


class LectureResponse(BaseModel):
    """``resources`` is null when the caller may not open the lecture."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    module_id: uuid.UUID
    title: str
    description: str | None = None
    order: int
    is_published: bool
    locked: bool = False
    resources: list[ResourceResponse] | None = None
    total_duration: int = 0
    created_at: datetime
    updated_at: datetime


class LectureListResponse(BaseModel):
    lectures: list[LectureResponse]
    total: int
    page: int
    limit: int


# ── Course content tree ───────────────────────────────────────────────────────

class ModuleContentResponse(ModuleResponse):
    lectures: list[LectureResponse] = Field(default_factory=list)


class CourseContentResponse(BaseModel):
    course_id: uuid.UUID
    can_edit: bool
    is_enrolled: bool
    total_modules: int
    total_lectures: int
    modules: list[ModuleContentResponse]
