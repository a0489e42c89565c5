import uuid

import pytest
from sqlalchemy import select

from app.exceptions import (
    DocumentNotFoundError,
    NotAnInstructorError,
    ValidationError,
    VerificationLockedError,
)
from app.models.enums import DocumentType, VerificationStatus
from app.models.notification import Notification
from app.verification import service
from shared.constants import Role
from shared.events import NotificationType
from tests.factories import make_user


def _doc(kind: DocumentType = DocumentType.DEGREE_CERTIFICATE) -> dict:
    name = f"{kind.value}.pdf"
    return {
        "type": kind,
        "original_name": name,
        "filename": f"{uuid.uuid4().hex}.pdf",
        "path": f"uploads/documents/{name}",
        "mimetype": "application/pdf",
        "size": 2048,
    }


async def _notifications_for(db, recipient_id) -> list[Notification]:
    rows = await db.execute(select(Notification).where(Notification.recipient_id == recipient_id))
    return list(rows.scalars().all())


async def _pending_instructor(db):
    return await make_user(db, Role.INSTRUCTOR, approved=False)


@pytest.mark.asyncio
async def test_upload_moves_to_review_and_alerts_admins(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    instructor = await _pending_instructor(db_session)

    user, documents = await service.upload_documents(
        db_session, instructor.id, [_doc(), _doc(DocumentType.ID_PROOF)]
    )

    assert user.verification_status == VerificationStatus.UNDER_REVIEW
    assert user.documents_uploaded is True
    assert len(documents) == 2
    assert not any(d.verified for d in documents)
    alerts = await _notifications_for(db_session, admin.id)
    assert [n.title for n in alerts] == ["Instructor Documents Uploaded"]
    assert alerts[0].action_required is True
    assert alerts[0].target_id == instructor.id


@pytest.mark.asyncio
async def test_upload_again_while_under_review_adds_documents(db_session) -> None:
    instructor = await _pending_instructor(db_session)
    await service.upload_documents(db_session, instructor.id, [_doc()])

    user, documents = await service.upload_documents(db_session, instructor.id, [_doc(DocumentType.OTHER)])

    assert user.verification_status == VerificationStatus.UNDER_REVIEW
    assert len(documents) == 2


@pytest.mark.asyncio
async def test_upload_requires_documents_and_an_instructor(db_session) -> None:
    instructor = await _pending_instructor(db_session)
    student = await make_user(db_session)

    with pytest.raises(ValidationError):
        await service.upload_documents(db_session, instructor.id, [])
    with pytest.raises(NotAnInstructorError):
        await service.upload_documents(db_session, student.id, [_doc()])


@pytest.mark.asyncio
async def test_verifying_every_document_approves(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    instructor = await _pending_instructor(db_session)
    _, (first, second) = await service.upload_documents(
        db_session, instructor.id, [_doc(), _doc(DocumentType.ID_PROOF)]
    )

    _, approved = await service.verify_document(
        db_session, user_id=instructor.id, document_id=first.id,
        verified=True, comments=None, admin_id=admin.id,
    )
    assert approved is False
    assert instructor.verification_status == VerificationStatus.UNDER_REVIEW

    doc, approved = await service.verify_document(
        db_session, user_id=instructor.id, document_id=second.id,
        verified=True, comments="Looks good", admin_id=admin.id,
    )
    assert approved is True
    assert doc.verified_by == admin.id
    assert doc.verified_at is not None
    assert instructor.verification_status == VerificationStatus.APPROVED
    assert instructor.is_approved is True
    types = [n.type for n in await _notifications_for(db_session, instructor.id)]
    assert types == [NotificationType.DOC_VERIFIED]


@pytest.mark.asyncio
async def test_one_rejection_rejects_and_keeps_first_reason(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    instructor = await _pending_instructor(db_session)
    _, (first, second) = await service.upload_documents(
        db_session, instructor.id, [_doc(), _doc(DocumentType.ID_PROOF)]
    )

    await service.verify_document(
        db_session, user_id=instructor.id, document_id=first.id,
        verified=False, comments="Blurry scan", admin_id=admin.id,
    )
    await service.verify_document(
        db_session, user_id=instructor.id, document_id=second.id,
        verified=False, comments="Expired", admin_id=admin.id,
    )

    assert instructor.verification_status == VerificationStatus.REJECTED
    assert instructor.verification_comments == "Blurry scan"
    assert instructor.is_approved is False
    rejections = await _notifications_for(db_session, instructor.id)
    assert [n.type for n in rejections] == [NotificationType.DOC_REJECTED] * 2
    assert "Blurry scan" in rejections[0].message or "Blurry scan" in rejections[1].message


@pytest.mark.asyncio
async def test_upload_is_locked_once_decided(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    instructor = await _pending_instructor(db_session)
    _, (doc,) = await service.upload_documents(db_session, instructor.id, [_doc()])
    await service.verify_document(
        db_session, user_id=instructor.id, document_id=doc.id,
        verified=False, comments="Wrong file", admin_id=admin.id,
    )

    with pytest.raises(VerificationLockedError):
        await service.upload_documents(db_session, instructor.id, [_doc()])


@pytest.mark.asyncio
async def test_reset_returns_to_pending_and_allows_upload(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    instructor = await _pending_instructor(db_session)
    _, (doc,) = await service.upload_documents(db_session, instructor.id, [_doc()])
    await service.verify_document(
        db_session, user_id=instructor.id, document_id=doc.id,
        verified=False, comments="Wrong file", admin_id=admin.id,
    )

    user = await service.reset_documents(db_session, instructor.id)

    assert user.verification_status == VerificationStatus.PENDING
    assert user.documents_uploaded is False
    assert user.verification_comments == ""
    assert await service.list_documents(db_session, instructor.id) == []

    user, documents = await service.upload_documents(db_session, instructor.id, [_doc()])
    assert user.verification_status == VerificationStatus.UNDER_REVIEW
    assert len(documents) == 1


@pytest.mark.asyncio
async def test_rejection_after_approval_keeps_approval_until_reset(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    instructor = await _pending_instructor(db_session)
    _, (doc,) = await service.upload_documents(db_session, instructor.id, [_doc()])
    await service.verify_document(
        db_session, user_id=instructor.id, document_id=doc.id,
        verified=True, comments=None, admin_id=admin.id,
    )

    _, approved = await service.verify_document(
        db_session, user_id=instructor.id, document_id=doc.id,
        verified=False, comments="Expired", admin_id=admin.id,
    )

    assert approved is False
    assert instructor.verification_status == VerificationStatus.REJECTED
    assert instructor.is_approved is True

    user = await service.reset_documents(db_session, instructor.id)
    assert user.is_approved is False
    assert user.verification_status == VerificationStatus.PENDING


@pytest.mark.asyncio
async def test_verify_rejects_document_of_another_instructor(db_session) -> None:
    admin = await make_user(db_session, Role.ADMIN)
    owner = await _pending_instructor(db_session)
    other = await _pending_instructor(db_session)
    _, (doc,) = await service.upload_documents(db_session, owner.id, [_doc()])

    with pytest.raises(DocumentNotFoundError):
        await service.verify_document(
            db_session, user_id=other.id, document_id=doc.id,
            verified=True, comments=None, admin_id=admin.id,
        )


@pytest.mark.asyncio
async def test_pending_queue_lists_instructors_under_review(db_session) -> None:
    waiting = await _pending_instructor(db_session)
    await _pending_instructor(db_session)
    await service.upload_documents(db_session, waiting.id, [_doc()])

    queue, total = await service.get_pending_queue(db_session, page=1, limit=10)

    assert total == 1
    assert [u.id for u in queue] == [waiting.id]
