"""Domain exception classes for the LMS service.

Raised by service-layer code and caught by controllers, which map each
category to an HTTP response via ``to_http_exception``.
"""
from fastapi import HTTPException, status


class DomainError(Exception):
    """Base for every error a service may raise on purpose."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "", *, errors: list[dict] | None = None):
        self.message = message or self.default_message()
        self.errors = errors or []
        super().__init__(self.message)

    @classmethod
    def default_message(cls) -> str:
        return cls.__doc__.strip().splitlines()[0] if cls.__doc__ else cls.__name__


# ── Categories ────────────────────────────────────────────────────────────────

class ValidationError(DomainError):
    """Invalid input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(DomainError):
    """Authentication failed."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AccessError(DomainError):
    """Access denied."""

    status_code = status.HTTP_403_FORBIDDEN


class PolicyError(DomainError):
    """Operation not allowed in the current state."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    """Resource not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    """Resource state conflict."""

    status_code = status.HTTP_409_CONFLICT


class CapacityError(DomainError):
    """Capacity exhausted."""

    status_code = status.HTTP_400_BAD_REQUEST


# ── Users & auth ──────────────────────────────────────────────────────────────

class UserNotFoundError(NotFoundError):
    """User not found."""


class UserAlreadyExistsError(ConflictError):
    """User already exists with this email."""


class InvalidCredentialsError(AuthenticationError):
    """Invalid credentials."""


class AccountDeactivatedError(AccessError):
    """Account is deactivated."""


class IncorrectPasswordError(ValidationError):
    """Current password is incorrect."""


class NotAnInstructorError(AccessError):
    """Only instructors can perform this action."""


class DocumentNotFoundError(NotFoundError):
    """Document not found."""


class VerificationLockedError(ConflictError):
    """Verification already decided; reset your documents before uploading again."""


# ── Courses & content ─────────────────────────────────────────────────────────

class CourseNotFoundError(NotFoundError):
    """Course not found."""


class CourseNotApprovedError(PolicyError):
    """Course is not yet approved for enrollment."""


class CourseCodeExistsError(ConflictError):
    """Course code already exists."""


class NotCourseOwnerError(AccessError):
    """Not authorized to modify this course."""


class MaterialNotFoundError(NotFoundError):
    """Material not found."""


class ModuleNotFoundError(NotFoundError):
    """Module not found."""


class LectureNotFoundError(NotFoundError):
    """Lecture not found."""


class InvalidReferenceError(ValidationError):
    """Referenced parent does not exist."""


class LectureLockedError(AccessError):
    """This lecture is locked."""


# ── Enrollment ────────────────────────────────────────────────────────────────

class EnrollmentNotFoundError(NotFoundError):
    """Enrollment not found."""


class AlreadyEnrolledError(ConflictError):
    """Already enrolled in this course."""


class AlreadyDroppedError(ConflictError):
    """Enrollment is already dropped."""


class CourseFullError(CapacityError):
    """Course is full."""


class NotEnrolledError(AccessError):
    """Not enrolled in this course."""


# ── Notifications & grading ───────────────────────────────────────────────────

class NotificationNotFoundError(NotFoundError):
    """Notification not found."""


class AssignmentNotFoundError(NotFoundError):
    """Assignment not found."""


class SubmissionNotFoundError(NotFoundError):
    """Submission not found."""


class AlreadySubmittedError(ConflictError):
    """Assignment already submitted."""


def to_http_exception(exc: DomainError) -> HTTPException:
    detail: str | dict = exc.message
    if exc.errors:
        detail = {"message": exc.message, "errors": exc.errors}
    return HTTPException(status_code=exc.status_code, detail=detail)
