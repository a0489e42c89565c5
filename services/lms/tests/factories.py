"""Row builders and auth helpers shared by the test modules."""
import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.service import create_access_token
from app.auth.utils import hash_password
from app.config import get_settings
from app.models.course import Course
from app.models.enums import CourseLevel, VerificationStatus
from app.models.lecture import Lecture
from app.models.module import Module
from app.models.user import User
from shared.constants import Role
from shared.models.user import CurrentUser

PASSWORD = "secret123"


async def make_user(
    db: AsyncSession,
    role: Role = Role.STUDENT,
    *,
    approved: bool = True,
    active: bool = True,
    email: str | None = None,
) -> User:
    user = User(
        email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
        password_hash=hash_password(PASSWORD),
        first_name=role.value.title(),
        last_name="Tester",
        role=role,
        is_active=active,
        is_approved=approved,
    )
    if role == Role.INSTRUCTOR:
        user.verification_status = (
            VerificationStatus.APPROVED if approved else VerificationStatus.PENDING
        )
    db.add(user)
    await db.flush()
    return user


async def make_course(
    db: AsyncSession,
    instructor: User,
    *,
    max_students: int = 30,
    approved: bool = True,
    active: bool = True,
    code: str | None = None,
) -> Course:
    course = Course(
        title="Intro to Testing",
        description="Writing tests that matter.",
        course_code=code or f"TST{uuid.uuid4().hex[:5].upper()}",
        instructor_id=instructor.id,
        credits=3,
        max_students=max_students,
        fees=Decimal("0"),
        category="Engineering",
        level=CourseLevel.BEGINNER,
        is_approved=approved,
        is_active=active,
        current_enrollment=0,
    )
    db.add(course)
    await db.flush()
    return course


async def make_module(
    db: AsyncSession, course: Course, *, order: int = 1, published: bool = False
) -> Module:
    module = Module(course_id=course.id, title=f"Module {order}", order=order, is_published=published)
    db.add(module)
    await db.flush()
    return module


async def make_lecture(
    db: AsyncSession, module: Module, *, order: int = 1, published: bool = False
) -> Lecture:
    lecture = Lecture(
        module_id=module.id,
        title=f"Lecture {order}",
        order=order,
        is_published=published,
        resources=[
            {"id": str(uuid.uuid4()), "type": "video", "url": "https://cdn.example.com/v.mp4",
             "title": None, "duration": 12}
        ],
    )
    db.add(lecture)
    await db.flush()
    return lecture


def as_current(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, email=user.email, roles=[user.role])


def auth_headers(user: User) -> dict[str, str]:
    settings = get_settings()
    token = create_access_token(
        user.id,
        user.email,
        [user.role.value],
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expire_seconds=3600,
    )
    return {"Authorization": f"Bearer {token}"}
