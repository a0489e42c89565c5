"""Full LMS schema: accounts, verification, courses, content, enrollment, grading, notifications

Revision ID: 001
Revises:
Create Date: 2026-10-18

Tables created:
  - users                 Accounts of every role, instructor profile and verification state
  - instructor_documents  Uploaded credentials and the admin decision on each
  - courses               Catalogue entries with the denormalised seat counter
  - modules               Ordered sections of a course (publish-gated)
  - lectures              Ordered units of a module with embedded resources (publish-gated)
  - enrollments           One row per (student, course); dropped rows are reused
  - assignments           Graded work attached to a course
  - submissions           One per (assignment, student)
  - grades                Percentage and letter per graded submission
  - notifications         Per-recipient inbox with soft delete

PostgreSQL-native ENUM types created:
  - user_role             student / instructor / admin
  - verification_status   pending / under_review / approved / rejected
  - document_type         degree / teaching certificate, ID proof, experience letter, other
  - course_level          Beginner / Intermediate / Advanced
  - enrollment_status     enrolled / dropped
  - notification_type     assignment ... user_approved

Downgrade: drops all tables and ENUM types in reverse dependency order.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ENUMS = {
    "user_role": ("student", "instructor", "admin"),
    "verification_status": ("pending", "under_review", "approved", "rejected"),
    "document_type": (
        "degree_certificate",
        "teaching_certificate",
        "id_proof",
        "experience_letter",
        "other",
    ),
    "course_level": ("Beginner", "Intermediate", "Advanced"),
    "enrollment_status": ("enrolled", "dropped"),
    "notification_type": (
        "assignment",
        "assignment_due",
        "grade",
        "enrollment",
        "payment",
        "system",
        "reminder",
        "announcement",
        "doc_verified",
        "doc_rejected",
        "course_approved",
        "course_rejected",
        "user_approved",
    ),
}


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        nullable=False,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.DateTime(timezone=True), nullable=True)
    return sa.Column(
        name, sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")
    )


def _flag(name: str, default: bool) -> sa.Column:
    return sa.Column(
        name, sa.Boolean(), nullable=False, server_default=sa.text("true" if default else "false")
    )


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(name=name, create_type=False)


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. PostgreSQL ENUM types ──────────────────────────────────────────────
    # PostgreSQL has no CREATE TYPE IF NOT EXISTS, so we use a DO/EXCEPTION block.
    for name, values in _ENUMS.items():
        labels = ", ".join(f"'{v}'" for v in values)
        op.execute(
            f"""
            DO $$ BEGIN
                CREATE TYPE {name} AS ENUM ({labels});
            EXCEPTION WHEN duplicate_object THEN NULL;
            END $$;
            """
        )

    # ── 2. users ──────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", _enum("user_role"), nullable=False, server_default=sa.text("'student'")),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        _flag("is_active", True),
        _flag("is_approved", False),
        _timestamp("last_login", nullable=True),
        # Instructor profile
        sa.Column("qualification", sa.String(200), nullable=True),
        sa.Column("experience_years", sa.Integer(), nullable=True),
        sa.Column(
            "specialization",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("bio", sa.Text(), nullable=True),
        _flag("documents_uploaded", False),
        sa.Column("verification_status", _enum("verification_status"), nullable=True),
        sa.Column("verification_comments", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_verification_status", "users", ["verification_status"])

    # ── 3. instructor_documents ───────────────────────────────────────────────
    op.create_table(
        "instructor_documents",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", _enum("document_type"), nullable=False),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("path", sa.String(500), nullable=False),
        sa.Column("mimetype", sa.String(100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _flag("verified", False),
        sa.Column("verified_by", postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp("verified_at", nullable=True),
        sa.Column("comments", sa.Text(), nullable=True),
        _timestamp("uploaded_at"),
        sa.PrimaryKeyConstraint("id", name="pk_instructor_documents"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_instructor_documents_user_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_instructor_documents_user_id", "instructor_documents", ["user_id"])

    # ── 4. courses ────────────────────────────────────────────────────────────
    op.create_table(
        "courses",
        _uuid_pk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("course_code", sa.String(20), nullable=False),
        sa.Column("instructor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("credits", sa.SmallInteger(), nullable=False),
        sa.Column("max_students", sa.Integer(), nullable=False),
        sa.Column("fees", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column(
            "level", _enum("course_level"), nullable=False, server_default=sa.text("'Beginner'")
        ),
        _flag("is_approved", False),
        _flag("is_active", True),
        sa.Column("current_enrollment", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "prerequisites",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "materials",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_courses"),
        sa.UniqueConstraint("course_code", name="uq_courses_course_code"),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"], name="fk_courses_instructor_id"),
        sa.CheckConstraint(
            "current_enrollment >= 0 AND current_enrollment <= max_students",
            name="ck_courses_enrollment_within_capacity",
        ),
        sa.CheckConstraint("credits BETWEEN 1 AND 10", name="ck_courses_credits_range"),
    )
    op.create_index("ix_courses_instructor_id", "courses", ["instructor_id"])
    op.create_index("ix_courses_category", "courses", ["category"])
    op.create_index("ix_courses_created_at", "courses", ["created_at"])

    # ── 5. modules / lectures ─────────────────────────────────────────────────
    op.create_table(
        "modules",
        _uuid_pk(),
        sa.Column("course_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        _flag("is_published", False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_modules"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_modules_course_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_modules_course_id_order", "modules", ["course_id", "order"])

    op.create_table(
        "lectures",
        _uuid_pk(),
        sa.Column("module_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        _flag("is_published", False),
        sa.Column(
            "resources",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_lectures"),
        sa.ForeignKeyConstraint(
            ["module_id"], ["modules.id"], name="fk_lectures_module_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_lectures_module_id_order", "lectures", ["module_id", "order"])

    # ── 6. enrollments ────────────────────────────────────────────────────────
    op.create_table(
        "enrollments",
        _uuid_pk(),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("course_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "status",
            _enum("enrollment_status"),
            nullable=False,
            server_default=sa.text("'enrolled'"),
        ),
        _timestamp("enrollment_date"),
        _timestamp("dropped_at", nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_enrollments"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], name="fk_enrollments_student_id"),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], name="fk_enrollments_course_id"),
        sa.UniqueConstraint("student_id", "course_id", name="uq_enrollments_student_course"),
    )
    op.create_index("ix_enrollments_course_id_status", "enrollments", ["course_id", "status"])

    # ── 7. assignments / submissions / grades ─────────────────────────────────
    op.create_table(
        "assignments",
        _uuid_pk(),
        sa.Column("course_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default=sa.text("100")),
        _timestamp("due_date", nullable=True),
        _flag("is_published", False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_assignments"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_assignments_course_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_assignments_course_id", "assignments", ["course_id"])

    op.create_table(
        "submissions",
        _uuid_pk(),
        sa.Column("assignment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        _timestamp("submitted_at"),
        sa.Column("grade_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_submissions"),
        sa.ForeignKeyConstraint(
            ["assignment_id"],
            ["assignments.id"],
            name="fk_submissions_assignment_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], name="fk_submissions_student_id"),
        sa.UniqueConstraint(
            "assignment_id", "student_id", name="uq_submissions_assignment_student"
        ),
    )

    op.create_table(
        "grades",
        _uuid_pk(),
        sa.Column("course_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("assignment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("letter_grade", sa.String(2), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_grades"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_grades_course_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], name="fk_grades_student_id"),
        sa.ForeignKeyConstraint(
            ["assignment_id"],
            ["assignments.id"],
            name="fk_grades_assignment_id",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_grades_course_id", "grades", ["course_id"])

    # ── 8. notifications ──────────────────────────────────────────────────────
    op.create_table(
        "notifications",
        _uuid_pk(),
        sa.Column("recipient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("type", _enum("notification_type"), nullable=False),
        sa.Column("target_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("target_url", sa.String(200), nullable=True),
        _flag("action_required", False),
        _flag("is_read", False),
        _flag("is_deleted", False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
        sa.ForeignKeyConstraint(
            ["recipient_id"], ["users.id"], name="fk_notifications_recipient_id"
        ),
    )
    op.create_index(
        "ix_notifications_recipient_created", "notifications", ["recipient_id", "created_at"]
    )


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    # Reverse FK dependency order
    op.drop_table("notifications")
    op.drop_table("grades")
    op.drop_table("submissions")
    op.drop_table("assignments")
    op.drop_table("enrollments")
    op.drop_table("lectures")
    op.drop_table("modules")
    op.drop_table("courses")
    op.drop_table("instructor_documents")
    op.drop_table("users")

    # ENUM types must go after the tables that use them
    for name in reversed(list(_ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name}")
