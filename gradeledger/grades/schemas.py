"""Request and response schemas for grades and the student overview."""
from datetime import datetime, UTC
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..directory.schemas import EnrollmentResponse, InstructorSummary, Profile
from ..models.enums import GradeStatus, GradingSchema


class GradeUpsert(BaseModel):
    student_id: str = Field(..., min_length=1)
    score: Optional[float] = Field(default=None, ge=0, le=1000)
    letter_grade: Optional[str] = None
    feedback: Optional[str] = None
    status: Optional[GradeStatus] = None


class GradeRelease(BaseModel):
    release_at: Optional[datetime] = None
    feedback: Optional[str] = None

    @field_validator('release_at')
    @classmethod
    def release_at_in_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Release times are stored in UTC; a value without an offset is taken as UTC."""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


class GradeHistoryResponse(BaseModel):
    sequence: int
    status: GradeStatus
    score: Optional[float] = None
    letter_grade: Optional[str] = None
    feedback: str = ""
    actor_id: Optional[str] = None
    changed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GradeResponse(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    score: Optional[float] = None
    letter_grade: Optional[str] = None
    feedback: str = ""
    status: GradeStatus
    released_at: Optional[datetime] = None
    history: List[GradeHistoryResponse] = []

    model_config = ConfigDict(from_attributes=True)


class EffectiveStatus(BaseModel):
    """Either "no grade exists yet" or the status of the grade that does.

    Kept apart from ``GradeStatus`` so an ungraded student is never mistaken for
    a grade sitting in ``pending_release``.
    """
    kind: Literal["no_grade", "graded"]
    grade_status: Optional[GradeStatus] = None

    @classmethod
    def no_grade(cls) -> "EffectiveStatus":
        return cls(kind="no_grade")

    @classmethod
    def graded(cls, status: GradeStatus) -> "EffectiveStatus":
        return cls(kind="graded", grade_status=status)

    @classmethod
    def for_grade(cls, grade) -> "EffectiveStatus":
        return cls.graded(grade.status) if grade is not None else cls.no_grade()

    @property
    def has_grade(self) -> bool:
        return self.kind == "graded"


class AssignmentGradeRow(BaseModel):
    student_id: str
    student: Optional[Profile] = None
    enrollment: Optional[EnrollmentResponse] = None
    status: EffectiveStatus
    grade: Optional[GradeResponse] = None


class ClassSummary(BaseModel):
    class_id: str
    title: str
    code: str
    primary_instructor: Optional[InstructorSummary] = None


class AssignmentOverviewRow(BaseModel):
    assignment_id: str
    class_id: str
    title: str
    description: Optional[str] = ""
    due_at: datetime
    publish_at: Optional[datetime] = None
    grading_schema: GradingSchema
    max_points: float
    status: EffectiveStatus
    grade: Optional[GradeResponse] = None
    class_summary: Optional[ClassSummary] = None
