"""Shared enums for models and schemas."""
import enum


class UserRole(enum.Enum):
    admin = "admin"
    teacher = "teacher"
    student = "student"


class UserStatus(enum.Enum):
    active = "active"
    inactive = "inactive"


class EnrollmentStatus(enum.Enum):
    active = "active"
    completed = "completed"
    dropped = "dropped"


class AssignmentType(enum.Enum):
    project = "project"
    task = "task"
    test = "test"


class GradingSchema(enum.Enum):
    points = "points"
    percentage = "percentage"
    pass_fail = "pass_fail"


class GradeStatus(enum.Enum):
    draft = "draft"
    pending_release = "pending_release"
    released = "released"


class NotificationChannel(enum.Enum):
    email = "email"
    in_app = "in_app"


class NotificationStatus(enum.Enum):
    pending = "pending"
    sent = "sent"
    failed = "failed"
