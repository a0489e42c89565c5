"""Admin review queue and document decisions."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import require_admin
from app.verification import controller
from app.verification.schemas import (
    PendingVerificationResponse,
    VerifyDocumentRequest,
    VerifyDocumentResponse,
)
from shared.models import CurrentUser, PaginationParams

router = APIRouter(prefix="/users", tags=["Verification (admin)"])


@router.get(
    "/pending-verification",
    response_model=PendingVerificationResponse,
    summary="Instructors whose documents await review",
)
async def pending_verification(
    pagination: PaginationParams = Depends(),
    _admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> PendingVerificationResponse:
    return await controller.pending_queue(db, pagination.page, pagination.limit)


@router.put(
    "/{user_id}/verify-document/{document_id}",
    response_model=VerifyDocumentResponse,
    summary="Verify or reject one instructor document",
)
async def verify_document(
    user_id: uuid.UUID,
    document_id: uuid.UUID,
    body: VerifyDocumentRequest,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> VerifyDocumentResponse:
    return await controller.verify_document(db, admin, user_id, document_id, body)
