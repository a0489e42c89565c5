"""
Instructor verification — pure business logic (zero FastAPI imports).

State machine over ``User.verification_status``:
  pending       → under_review  upload_documents()
  under_review  → under_review  upload_documents()   (more documents)
  *             → approved      verify_document(verified=True), every doc verified
  *             → rejected      verify_document(verified=False)
  approved      → pending       reset_documents()
  rejected      → pending       reset_documents()
  approved/rejected → (blocked) upload_documents()    VerificationLockedError

Transaction contract: these functions only flush(); get_db commits at the end
of the request, so a decision and its notification land together.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    DocumentNotFoundError,
    NotAnInstructorError,
    UserNotFoundError,
    ValidationError,
    VerificationLockedError,
)
from app.models.enums import VerificationStatus
from app.models.user import InstructorDocument, User
from app.notifications.dispatcher import dispatch_to_admins, dispatch_to_user
from shared.constants import Role
from shared.events import NotificationEvent, NotificationType

logger = logging.getLogger(__name__)

_UPLOAD_ALLOWED_FROM = frozenset({VerificationStatus.PENDING, VerificationStatus.UNDER_REVIEW})


async def _get_instructor_or_404(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    if user.role != Role.INSTRUCTOR:
        raise NotAnInstructorError()
    return user


async def list_documents(db: AsyncSession, user_id: uuid.UUID) -> list[InstructorDocument]:
    result = await db.execute(
        sa.select(InstructorDocument)
        .where(InstructorDocument.user_id == user_id)
        .order_by(InstructorDocument.uploaded_at.asc(), InstructorDocument.id.asc())
    )
    return list(result.scalars().all())


async def upload_documents(
    db: AsyncSession, user_id: uuid.UUID, documents: list[dict]
) -> tuple[User, list[InstructorDocument]]:
    """Attach document metadata and move the instructor into review."""
    user = await _get_instructor_or_404(db, user_id)
    if not documents:
        raise ValidationError("No documents uploaded")
    if user.verification_status not in _UPLOAD_ALLOWED_FROM:
        raise VerificationLockedError()

    for meta in documents:
        db.add(InstructorDocument(user_id=user.id, **meta))
    user.documents_uploaded = True
    user.verification_status = VerificationStatus.UNDER_REVIEW
    await db.flush()

    await dispatch_to_admins(
        db,
        NotificationEvent(
            type=NotificationType.SYSTEM,
            title="Instructor Documents Uploaded",
            message=f"{user.full_name} has uploaded verification documents for review.",
            target_id=user.id,
            target_url="/admin/instructor-verification",
            action_required=True,
        ),
    )
    await db.refresh(user)
    return user, await list_documents(db, user.id)


async def verify_document(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    document_id: uuid.UUID,
    verified: bool,
    comments: str | None,
    admin_id: uuid.UUID,
) -> tuple[InstructorDocument, bool]:
    """Record an admin decision on one document. Returns (document, user_approved).

    Approval needs every current document verified; a single rejection moves
    the instructor to ``rejected`` regardless of the others. A rejection after
    approval leaves ``is_approved`` set until ``reset_documents`` clears it.
    """
    user = await _get_instructor_or_404(db, user_id)
    doc = await db.get(InstructorDocument, document_id)
    if doc is None or doc.user_id != user.id:
        raise DocumentNotFoundError()

    doc.verified = verified
    doc.verified_by = admin_id
    doc.verified_at = datetime.now(timezone.utc)
    doc.comments = comments or ""
    await db.flush()

    documents = await list_documents(db, user.id)
    approved = verified and bool(documents) and all(d.verified for d in documents)

    if approved:
        user.is_approved = True
        user.verification_status = VerificationStatus.APPROVED
        event = NotificationEvent(
            type=NotificationType.DOC_VERIFIED,
            title="Verification Complete",
            message=(
                "Congratulations! Your instructor account has been approved. "
                "You can now create courses."
            ),
            target_url="/instructor/dashboard",
        )
    elif not verified:
        user.verification_status = VerificationStatus.REJECTED
        # First rejection reason wins
        if not user.verification_comments:
            user.verification_comments = comments or "Document verification failed"
        event = NotificationEvent(
            type=NotificationType.DOC_REJECTED,
            title="Document Verification Failed",
            message=(
                f"Your document verification was rejected. Reason: {comments or 'Not specified'}. "
                "Please reset and upload your documents again."
            )[:500],
            target_url="/upload-documents",
            action_required=True,
        )
    else:
        event = None
    await db.flush()

    if event is not None:
        await dispatch_to_user(db, user.id, event)
    logger.info(
        "Document %s of %s %s by %s", doc.id, user.id, "verified" if verified else "rejected", admin_id
    )
    await db.refresh(doc)
    return doc, approved


async def reset_documents(db: AsyncSession, user_id: uuid.UUID) -> User:
    """Discard every document and return the instructor to ``pending``."""
    user = await _get_instructor_or_404(db, user_id)
    await db.execute(
        sa.delete(InstructorDocument).where(InstructorDocument.user_id == user.id)
    )
    user.documents_uploaded = False
    user.verification_status = VerificationStatus.PENDING
    user.verification_comments = ""
    user.is_approved = False
    await db.flush()
    await db.refresh(user)
    return user


async def get_pending_queue(
    db: AsyncSession, page: int, limit: int
) -> tuple[list[User], int]:
    """Instructors with documents awaiting review, oldest registration first."""
    where = (
        User.role == Role.INSTRUCTOR,
        User.is_active.is_(True),
        User.verification_status == VerificationStatus.UNDER_REVIEW,
    )
    total = await db.scalar(sa.select(sa.func.count()).select_from(User).where(*where))
    rows = await db.execute(
        sa.select(User)
        .where(*where)
        .order_by(User.created_at.asc())
        .limit(limit)
        .offset((page - 1) * limit)
    )
    return list(rows.scalars().all()), total or 0
