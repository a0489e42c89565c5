import pytest
from sqlalchemy import select

from app.models.course import Course
from shared.constants import Role
from tests.factories import PASSWORD, auth_headers, make_course, make_lecture, make_module, make_user


async def _seed(session_factory, build):
    async with session_factory() as session:
        result = await build(session)
        await session.commit()
    return result


@pytest.mark.asyncio
async def test_health(async_client) -> None:
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "lms"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(async_client) -> None:
    resp = await async_client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


@pytest.mark.asyncio
async def test_register_then_login(async_client) -> None:
    body = {
        "email": "new.student@example.com",
        "password": PASSWORD,
        "first_name": "New",
        "last_name": "Student",
    }
    registered = await async_client.post("/api/v1/auth/register", json=body)
    assert registered.status_code == 201
    assert registered.json()["requires_approval"] is False

    login = await async_client.post(
        "/api/v1/auth/login", json={"email": body["email"], "password": PASSWORD}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = await async_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == body["email"]
    assert me.json()["last_login"] is not None


@pytest.mark.asyncio
async def test_validation_errors_use_the_envelope(async_client) -> None:
    resp = await async_client.post(
        "/api/v1/auth/register",
        json={"email": "not-an-email", "password": "x", "first_name": "A", "last_name": "B"},
    )

    assert resp.status_code == 400
    payload = resp.json()
    assert payload["message"] == "Validation failed"
    fields = {e["field"] for e in payload["errors"]}
    assert {"email", "password"} <= fields
    assert "request_id" in payload


@pytest.mark.asyncio
async def test_protected_route_requires_token(async_client) -> None:
    resp = await async_client.get("/api/v1/notifications")
    assert resp.status_code == 401
    assert "message" in resp.json()


@pytest.mark.asyncio
async def test_enroll_until_full(async_client, session_factory) -> None:
    async def build(session):
        instructor = await make_user(session, Role.INSTRUCTOR)
        course = await make_course(session, instructor, max_students=1)
        first = await make_user(session)
        second = await make_user(session)
        return course, first, second

    course, first, second = await _seed(session_factory, build)

    ok = await async_client.post(
        "/api/v1/enrollments", json={"course_id": str(course.id)}, headers=auth_headers(first)
    )
    assert ok.status_code == 201
    assert ok.json()["enrollment"]["status"] == "enrolled"

    full = await async_client.post(
        "/api/v1/enrollments", json={"course_id": str(course.id)}, headers=auth_headers(second)
    )
    assert full.status_code == 400
    assert full.json()["message"] == "Course is full."

    async with session_factory() as session:
        counter = await session.scalar(
            select(Course.current_enrollment).where(Course.id == course.id)
        )
    assert counter == 1


@pytest.mark.asyncio
async def test_instructor_cannot_enroll(async_client, session_factory) -> None:
    async def build(session):
        instructor = await make_user(session, Role.INSTRUCTOR)
        return instructor, await make_course(session, instructor)

    instructor, course = await _seed(session_factory, build)

    resp = await async_client.post(
        "/api/v1/enrollments", json={"course_id": str(course.id)}, headers=auth_headers(instructor)
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_locked_lecture_is_forbidden(async_client, session_factory) -> None:
    async def build(session):
        instructor = await make_user(session, Role.INSTRUCTOR)
        course = await make_course(session, instructor)
        module = await make_module(session, course, published=True)
        draft = await make_lecture(session, module, order=1, published=False)
        live = await make_lecture(session, module, order=2, published=True)
        outsider = await make_user(session)
        return instructor, course, draft, live, outsider

    instructor, course, draft, live, outsider = await _seed(session_factory, build)

    # Published but not enrolled
    resp = await async_client.get(f"/api/v1/lectures/{live.id}", headers=auth_headers(outsider))
    assert resp.status_code == 403
    assert resp.json()["message"] == "This lecture is locked."

    owner = await async_client.get(f"/api/v1/lectures/{draft.id}", headers=auth_headers(instructor))
    assert owner.status_code == 200
    assert owner.json()["locked"] is False
    assert owner.json()["resources"][0]["url"].startswith("https://")


@pytest.mark.asyncio
async def test_course_content_shows_locked_titles(async_client, session_factory) -> None:
    async def build(session):
        instructor = await make_user(session, Role.INSTRUCTOR)
        course = await make_course(session, instructor)
        module = await make_module(session, course, published=True)
        await make_lecture(session, module, order=1, published=True)
        await make_lecture(session, module, order=2, published=False)
        await make_module(session, course, order=2, published=False)
        student = await make_user(session)
        return course, student

    course, student = await _seed(session_factory, build)
    headers = auth_headers(student)
    enrolled = await async_client.post(
        "/api/v1/enrollments", json={"course_id": str(course.id)}, headers=headers
    )
    assert enrolled.status_code == 201

    resp = await async_client.get(f"/api/v1/courses/{course.id}/content", headers=headers)

    assert resp.status_code == 200
    tree = resp.json()
    assert tree["is_enrolled"] is True
    assert tree["total_modules"] == 1
    lectures = tree["modules"][0]["lectures"]
    assert [(lec["title"], lec["locked"]) for lec in lectures] == [
        ("Lecture 1", False),
        ("Lecture 2", True),
    ]
    assert lectures[1]["resources"] is None
    assert lectures[0]["total_duration"] == 12


@pytest.mark.asyncio
async def test_module_listing_is_paginated(async_client, session_factory) -> None:
    async def build(session):
        instructor = await make_user(session, Role.INSTRUCTOR)
        course = await make_course(session, instructor)
        for order in range(1, 4):
            await make_module(session, course, order=order, published=True)
        return course, await make_user(session)

    course, student = await _seed(session_factory, build)

    resp = await async_client.get(
        "/api/v1/modules",
        params={"course": str(course.id), "page": 2, "limit": 2},
        headers=auth_headers(student),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert sorted(body) == ["limit", "modules", "page", "total"]
    assert (body["total"], body["page"], body["limit"]) == (3, 2, 2)
    assert [m["order"] for m in body["modules"]] == [3]


@pytest.mark.asyncio
async def test_lecture_listing_keys_lectures(async_client, session_factory) -> None:
    async def build(session):
        instructor = await make_user(session, Role.INSTRUCTOR)
        course = await make_course(session, instructor)
        module = await make_module(session, course, published=True)
        await make_lecture(session, module, order=1, published=True)
        await make_lecture(session, module, order=2)
        return module, await make_user(session)

    module, student = await _seed(session_factory, build)

    resp = await async_client.get(
        "/api/v1/lectures", params={"module": str(module.id)}, headers=auth_headers(student)
    )

    assert resp.status_code == 200
    body = resp.json()
    assert sorted(body) == ["lectures", "limit", "page", "total"]
    assert body["total"] == 2
    assert [(lec["order"], lec["locked"]) for lec in body["lectures"]] == [(1, True), (2, True)]
