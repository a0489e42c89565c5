"""Instructor-facing verification routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import UserResponse
from app.database import get_db
from app.dependencies import require_instructor
from app.verification import controller
from app.verification.schemas import UploadDocumentsRequest, UploadDocumentsResponse
from shared.models.user import CurrentUser

router = APIRouter(tags=["Verification"])


@router.post(
    "/auth/upload-documents",
    response_model=UploadDocumentsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit verification document metadata",
)
async def upload_documents(
    body: UploadDocumentsRequest,
    current_user: CurrentUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_db),
) -> UploadDocumentsResponse:
    return await controller.upload_documents(db, current_user, body)


@router.put(
    "/users/reset-documents",
    response_model=UserResponse,
    summary="Discard uploaded documents and restart verification",
)
async def reset_documents(
    current_user: CurrentUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return await controller.reset_documents(db, current_user)
