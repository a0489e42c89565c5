# Import all models so Alembic can discover them via Base.metadata
from .course import Course
from .enrollment import Enrollment
from .grading import Assignment, Grade, Submission
from .lecture import Lecture
from .module import Module
from .notification import Notification
from .user import InstructorDocument, User

__all__ = [
    "Assignment",
    "Course",
    "Enrollment",
    "Grade",
    "InstructorDocument",
    "Lecture",
    "Module",
    "Notification",
    "Submission",
    "User",
]
