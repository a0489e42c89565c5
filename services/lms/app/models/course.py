import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from .enums import CourseLevel, JSONColumn, course_level_enum


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Always stored upper-cased
    course_code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    instructor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    credits: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    max_students: Mapped[int] = mapped_column(Integer, nullable=False)
    fees: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[CourseLevel] = mapped_column(
        course_level_enum, nullable=False, default=CourseLevel.BEGINNER
    )
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Denormalised seat counter; only moved by conditional UPDATEs in enrollment.service
    current_enrollment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    prerequisites: Mapped[list[str]] = mapped_column(JSONColumn, nullable=False, default=list)
    # Legacy embedded materials: [{id, title, type, url, filename, description, is_free, upload_date}]
    materials: Mapped[list[dict]] = mapped_column(JSONColumn, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    instructor = relationship("User", lazy="noload")
    modules = relationship("Module", back_populates="course", lazy="noload")

    __table_args__ = (
        CheckConstraint(
            "current_enrollment >= 0 AND current_enrollment <= max_students",
            name="ck_courses_enrollment_within_capacity",
        ),
        CheckConstraint("credits BETWEEN 1 AND 10", name="ck_courses_credits_range"),
        Index("ix_courses_instructor_id", "instructor_id"),
        Index("ix_courses_category", "category"),
        Index("ix_courses_created_at", "created_at"),
    )

    @property
    def available_seats(self) -> int:
        return max(self.max_students - self.current_enrollment, 0)
