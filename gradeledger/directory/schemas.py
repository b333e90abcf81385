"""Pydantic projections of directory and registry records."""
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..models.enums import EnrollmentStatus, UserRole


class Profile(BaseModel):
    """Human-readable view of a user; never carries credentials."""
    id: str
    name: Optional[str] = None
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class InstructorSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: str

    model_config = ConfigDict(from_attributes=True)


class EnrollmentResponse(BaseModel):
    id: str
    class_id: str
    student_id: str
    status: EnrollmentStatus

    model_config = ConfigDict(from_attributes=True)
