from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.auth.schemas import UserResponse
from app.models.enums import DocumentType, VerificationStatus


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class DocumentMetadata(_Base):
    """Metadata of one stored file; the bytes themselves never pass through this service."""

    type: DocumentType = DocumentType.OTHER
    original_name: str = Field(min_length=1, max_length=255)
    filename: str = Field(min_length=1, max_length=255)
    path: str = Field(min_length=1, max_length=500)
    mimetype: str = Field(min_length=1, max_length=100)
    size: int = Field(ge=0)


class UploadDocumentsRequest(_Base):
    documents: list[DocumentMetadata] = Field(min_length=1)


class VerifyDocumentRequest(_Base):
    verified: bool
    comments: str | None = Field(default=None, max_length=1000)


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    type: DocumentType
    original_name: str
    filename: str
    path: str
    mimetype: str
    size: int
    verified: bool
    verified_by: uuid.UUID | None = None
    verified_at: datetime | None = None
    comments: str | None = None
    uploaded_at: datetime


class UploadDocumentsResponse(BaseModel):
    message: str
    documents: list[DocumentResponse]
    documents_uploaded: bool
    verification_status: VerificationStatus


class VerifyDocumentResponse(BaseModel):
    message: str
    document: DocumentResponse
    user_approved: bool


class InstructorReviewItem(UserResponse):
    documents: list[DocumentResponse] = Field(default_factory=list)


class PendingVerificationResponse(BaseModel):
    users: list[InstructorReviewItem]
    total: int
    page: int
    limit: int
