import uuid

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select

from app.content import service
from app.content.schemas import CreateLectureRequest
from app.enrollment.service import enroll
from app.exceptions import (
    AccessError,
    InvalidReferenceError,
    LectureLockedError,
    LectureNotFoundError,
    ModuleNotFoundError,
    ValidationError,
)
from app.models.lecture import Lecture
from shared.constants import Role
from tests.factories import as_current, make_course, make_lecture, make_module, make_user

VIDEO = [{"type": "video", "url": "https://cdn.example.com/intro.mp4", "duration": 9}]


async def _course_with_owner(db):
    instructor = await make_user(db, Role.INSTRUCTOR)
    course = await make_course(db, instructor)
    return instructor, course


# ── Modules ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_module_starts_unpublished_and_appends(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    actor = as_current(instructor)

    first = await service.create_module(db_session, actor, course_id=course.id, title="Basics")
    second = await service.create_module(db_session, actor, course_id=course.id, title="  Next  ")
    pinned = await service.create_module(db_session, actor, course_id=course.id, title="Pinned", order=7)

    assert first.is_published is False
    assert (first.order, second.order, pinned.order) == (1, 2, 7)
    assert second.title == "Next"


@pytest.mark.asyncio
async def test_create_module_unknown_course_is_invalid_reference(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    with pytest.raises(InvalidReferenceError):
        await service.create_module(
            db_session, as_current(instructor), course_id=uuid.uuid4(), title="Orphan"
        )


@pytest.mark.asyncio
async def test_create_module_rejects_blank_title(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    with pytest.raises(ValidationError):
        await service.create_module(db_session, as_current(instructor), course_id=course.id, title="   ")


@pytest.mark.asyncio
async def test_only_owner_or_admin_can_write(db_session) -> None:
    _, course = await _course_with_owner(db_session)
    intruder = await make_user(db_session, Role.INSTRUCTOR)
    admin = await make_user(db_session, Role.ADMIN)

    with pytest.raises(AccessError):
        await service.create_module(db_session, as_current(intruder), course_id=course.id, title="Nope")

    module = await service.create_module(db_session, as_current(admin), course_id=course.id, title="Ok")
    assert module.course_id == course.id


@pytest.mark.asyncio
async def test_publish_toggle_is_idempotent(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    actor = as_current(instructor)
    module = await make_module(db_session, course)

    await service.set_module_published(db_session, module.id, actor, True)
    again = await service.set_module_published(db_session, module.id, actor, True)
    assert again.is_published is True

    back = await service.set_module_published(db_session, module.id, actor, False)
    assert back.is_published is False


@pytest.mark.asyncio
async def test_delete_module_removes_its_lectures(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    module = await make_module(db_session, course)
    other = await make_module(db_session, course, order=2)
    for order in (1, 2, 3):
        await make_lecture(db_session, module, order=order)
    survivor = await make_lecture(db_session, other)

    removed = await service.delete_module(db_session, module.id, as_current(instructor))

    assert removed == 3
    remaining = await db_session.scalar(select(func.count()).select_from(Lecture))
    assert remaining == 1
    assert (await service.get_lecture(db_session, survivor.id)).id == survivor.id
    with pytest.raises(ModuleNotFoundError):
        await service.get_module(db_session, module.id)


@pytest.mark.asyncio
async def test_list_modules_hides_drafts_from_students(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    student = await make_user(db_session)
    await make_module(db_session, course, order=2, published=True)
    await make_module(db_session, course, order=1, published=False)
    await make_module(db_session, course, order=3, published=True)

    student_view, student_total = await service.list_modules(
        db_session, as_current(student), course_id=course.id
    )
    owner_view, owner_total = await service.list_modules(
        db_session, as_current(instructor), course_id=course.id
    )

    assert [m.order for m in student_view] == [2, 3]
    assert student_total == 2
    assert [m.order for m in owner_view] == [1, 2, 3]
    assert owner_total == 3


@pytest.mark.asyncio
async def test_list_modules_paginates(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    for order in range(1, 6):
        await make_module(db_session, course, order=order)

    page, total = await service.list_modules(
        db_session, as_current(instructor), course_id=course.id, page=2, limit=2
    )
    assert total == 5
    assert [m.order for m in page] == [3, 4]


@pytest.mark.asyncio
async def test_hidden_module_reads_as_missing(db_session) -> None:
    _, course = await _course_with_owner(db_session)
    student = await make_user(db_session)
    draft = await make_module(db_session, course)

    with pytest.raises(ModuleNotFoundError):
        await service.get_visible_module(db_session, draft.id, as_current(student))


# ── Lectures ──────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_lecture_assigns_resource_ids(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    module = await make_module(db_session, course)

    lecture = await service.create_lecture(
        db_session, as_current(instructor), module_id=module.id, title="Welcome", resources=VIDEO
    )

    assert lecture.is_published is False
    assert lecture.order == 1
    assert len(lecture.resources) == 1
    assert lecture.resources[0]["id"]
    assert lecture.resources[0]["duration"] == 9


@pytest.mark.asyncio
async def test_create_lecture_requires_content(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    module = await make_module(db_session, course)

    with pytest.raises(ValidationError):
        await service.create_lecture(
            db_session, as_current(instructor), module_id=module.id, title="Empty", resources=[]
        )
    with pytest.raises(ValidationError):
        await service.create_lecture(
            db_session,
            as_current(instructor),
            module_id=module.id,
            title="Blank url",
            resources=[{"type": "video", "url": "  "}],
        )


@pytest.mark.asyncio
async def test_create_lecture_unknown_module(db_session) -> None:
    instructor = await make_user(db_session, Role.INSTRUCTOR)
    with pytest.raises(InvalidReferenceError):
        await service.create_lecture(
            db_session, as_current(instructor), module_id=uuid.uuid4(), title="X", resources=VIDEO
        )


def test_single_content_fields_fold_into_resources() -> None:
    body = CreateLectureRequest(
        module_id=uuid.uuid4(),
        title="Legacy",
        content_type="document",
        content_url="https://cdn.example.com/notes.pdf",
        duration=4,
    )
    resources = body.resource_dicts()
    assert resources == [
        {"type": "document", "url": "https://cdn.example.com/notes.pdf", "title": None, "duration": 4}
    ]


def test_lecture_request_rejects_unknown_fields() -> None:
    with pytest.raises(PydanticValidationError):
        CreateLectureRequest(module_id=uuid.uuid4(), title="X", resources=[], surprise=True)


@pytest.mark.asyncio
async def test_lecture_gate_for_enrolled_student(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    student = await make_user(db_session)
    await enroll(db_session, student.id, course.id)
    module = await make_module(db_session, course, published=True)
    open_lecture = await make_lecture(db_session, module, order=1, published=True)
    draft_lecture = await make_lecture(db_session, module, order=2, published=False)

    opened = await service.get_accessible_lecture(db_session, open_lecture.id, as_current(student))
    assert opened.id == open_lecture.id
    with pytest.raises(LectureLockedError):
        await service.get_accessible_lecture(db_session, draft_lecture.id, as_current(student))
    # The owner opens drafts
    owner_view = await service.get_accessible_lecture(
        db_session, draft_lecture.id, as_current(instructor)
    )
    assert owner_view.id == draft_lecture.id


@pytest.mark.asyncio
async def test_lecture_gate_without_enrollment(db_session) -> None:
    _, course = await _course_with_owner(db_session)
    outsider = await make_user(db_session)
    module = await make_module(db_session, course, published=True)
    lecture = await make_lecture(db_session, module, published=True)

    with pytest.raises(LectureLockedError):
        await service.get_accessible_lecture(db_session, lecture.id, as_current(outsider))


@pytest.mark.asyncio
async def test_lecture_in_hidden_module_reads_as_missing(db_session) -> None:
    _, course = await _course_with_owner(db_session)
    student = await make_user(db_session)
    await enroll(db_session, student.id, course.id)
    module = await make_module(db_session, course, published=False)
    lecture = await make_lecture(db_session, module, published=True)

    with pytest.raises(LectureNotFoundError):
        await service.get_accessible_lecture(db_session, lecture.id, as_current(student))


@pytest.mark.asyncio
async def test_list_lectures_marks_locked_entries(db_session) -> None:
    _, course = await _course_with_owner(db_session)
    student = await make_user(db_session)
    await enroll(db_session, student.id, course.id)
    module = await make_module(db_session, course, published=True)
    await make_lecture(db_session, module, order=2, published=False)
    await make_lecture(db_session, module, order=1, published=True)

    items, total = await service.list_lectures(db_session, as_current(student), module_id=module.id)

    assert total == 2
    assert [(lecture.order, accessible) for lecture, accessible in items] == [(1, True), (2, False)]


@pytest.mark.asyncio
async def test_update_lecture_rejects_emptied_resources(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    module = await make_module(db_session, course)
    lecture = await make_lecture(db_session, module)

    with pytest.raises(ValidationError):
        await service.update_lecture(db_session, lecture.id, as_current(instructor), {"resources": []})


# ── Content tree ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_course_content_tree(db_session) -> None:
    instructor, course = await _course_with_owner(db_session)
    student = await make_user(db_session)
    await enroll(db_session, student.id, course.id)
    published = await make_module(db_session, course, order=1, published=True)
    await make_module(db_session, course, order=2, published=False)
    await make_lecture(db_session, published, order=1, published=True)
    await make_lecture(db_session, published, order=2, published=False)

    _, viewer, tree = await service.get_course_content(db_session, course.id, as_current(student))
    assert viewer.is_enrolled and not viewer.can_edit
    assert [m.id for m, _ in tree] == [published.id]
    assert [accessible for _, accessible in tree[0][1]] == [True, False]

    _, owner_viewer, owner_tree = await service.get_course_content(
        db_session, course.id, as_current(instructor)
    )
    assert owner_viewer.can_edit
    assert len(owner_tree) == 2
    assert all(accessible for _, lectures in owner_tree for _, accessible in lectures)
