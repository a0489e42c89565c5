import enum

from sqlalchemy import JSON, Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB

from shared.constants import Role
from shared.events import NotificationType


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class DocumentType(str, enum.Enum):
    DEGREE_CERTIFICATE = "degree_certificate"
    TEACHING_CERTIFICATE = "teaching_certificate"
    ID_PROOF = "id_proof"
    EXPERIENCE_LETTER = "experience_letter"
    OTHER = "other"


class CourseLevel(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class MaterialType(str, enum.Enum):
    PDF = "pdf"
    VIDEO = "video"
    LINK = "link"
    DOCUMENT = "document"
    NOTE = "note"


class ResourceType(str, enum.Enum):
    VIDEO = "video"
    DOCUMENT = "document"
    LINK = "link"


class EnrollmentStatus(str, enum.Enum):
    ENROLLED = "enrolled"
    DROPPED = "dropped"


def _values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


# Reuse across models to avoid duplicate type creation on PostgreSQL
user_role_enum = SAEnum(Role, name="user_role", values_callable=_values)
verification_status_enum = SAEnum(
    VerificationStatus, name="verification_status", values_callable=_values
)
document_type_enum = SAEnum(DocumentType, name="document_type", values_callable=_values)
course_level_enum = SAEnum(CourseLevel, name="course_level", values_callable=_values)
enrollment_status_enum = SAEnum(
    EnrollmentStatus, name="enrollment_status", values_callable=_values
)
notification_type_enum = SAEnum(
    NotificationType, name="notification_type", values_callable=_values
)

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONColumn = JSON().with_variant(JSONB(), "postgresql")
