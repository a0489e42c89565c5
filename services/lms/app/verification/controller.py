from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import UserResponse
from app.exceptions import DomainError, to_http_exception
from app.verification import service
from app.verification.schemas import (
    DocumentResponse,
    InstructorReviewItem,
    PendingVerificationResponse,
    UploadDocumentsRequest,
    UploadDocumentsResponse,
    VerifyDocumentRequest,
    VerifyDocumentResponse,
)
from shared.models.user import CurrentUser


async def upload_documents(
    db: AsyncSession, current_user: CurrentUser, body: UploadDocumentsRequest
) -> UploadDocumentsResponse:
    try:
        user, documents = await service.upload_documents(
            db, current_user.id, [d.model_dump() for d in body.documents]
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UploadDocumentsResponse(
        message="Documents uploaded successfully. Awaiting admin verification.",
        documents=[DocumentResponse.model_validate(d) for d in documents],
        documents_uploaded=user.documents_uploaded,
        verification_status=user.verification_status,
    )


async def reset_documents(db: AsyncSession, current_user: CurrentUser) -> UserResponse:
    try:
        user = await service.reset_documents(db, current_user.id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UserResponse.model_validate(user)


async def verify_document(
    db: AsyncSession,
    admin: CurrentUser,
    user_id: uuid.UUID,
    document_id: uuid.UUID,
    body: VerifyDocumentRequest,
) -> VerifyDocumentResponse:
    try:
        doc, approved = await service.verify_document(
            db,
            user_id=user_id,
            document_id=document_id,
            verified=body.verified,
            comments=body.comments,
            admin_id=admin.id,
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return VerifyDocumentResponse(
        message=f"Document {'verified' if body.verified else 'rejected'} successfully",
        document=DocumentResponse.model_validate(doc),
        user_approved=approved,
    )


async def pending_queue(db: AsyncSession, page: int, limit: int) -> PendingVerificationResponse:
    users, total = await service.get_pending_queue(db, page, limit)
    items = []
    for user in users:
        docs = await service.list_documents(db, user.id)
        item = InstructorReviewItem.model_validate(user)
        item.documents = [DocumentResponse.model_validate(d) for d in docs]
        items.append(item)
    return PendingVerificationResponse(users=items, total=total, page=page, limit=limit)
