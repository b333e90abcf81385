"""SQLAlchemy models for the grading engine."""

from .enums import (
    UserRole, UserStatus, EnrollmentStatus, AssignmentType, GradingSchema,
    GradeStatus, NotificationChannel, NotificationStatus,
)
from .user import User
from .course import ClassEntity, Enrollment
from .assignment import Assignment
from .grade import Grade, GradeHistoryEntry
from .review_group import StudentGroup, GraderGroup, GroupBundle
from .notification import Notification

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "ClassEntity",
    "Enrollment",
    "EnrollmentStatus",
    "Assignment",
    "AssignmentType",
    "GradingSchema",
    "Grade",
    "GradeHistoryEntry",
    "GradeStatus",
    "StudentGroup",
    "GraderGroup",
    "GroupBundle",
    "Notification",
    "NotificationChannel",
    "NotificationStatus",
]
