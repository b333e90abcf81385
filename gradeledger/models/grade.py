"""Grade and grade history models."""

from datetime import datetime, UTC

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Float, Integer,
    Enum as SQLEnum, UniqueConstraint,
)
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from .enums import GradeStatus


class Grade(Base):
    """One grade per (assignment, student).

    ``revision`` counts history entries; every write bumps it in the same
    ``UPDATE`` that changes the grade so the appended entry's sequence is unique.
    """
    __tablename__ = "grades"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_grades_assignment_student"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assignment_id = Column(String(36), ForeignKey("assignments.id"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    score = Column(Float, nullable=True)
    letter_grade = Column(String(20), nullable=True)
    feedback = Column(Text, nullable=False, default="")
    status = Column(SQLEnum(GradeStatus), nullable=False, default=GradeStatus.draft)
    released_at = Column(DateTime(timezone=True), nullable=True)
    revision = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Relationships
    history = relationship(
        "GradeHistoryEntry",
        back_populates="grade",
        order_by="GradeHistoryEntry.sequence",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Grade(id={self.id}, assignment_id={self.assignment_id}, student_id={self.student_id}, status={self.status})>"

    @property
    def is_released(self) -> bool:
        return self.status == GradeStatus.released


class GradeHistoryEntry(Base):
    """Immutable snapshot of a grade after one write."""
    __tablename__ = "grade_history"
    __table_args__ = (
        UniqueConstraint("grade_id", "sequence", name="uq_grade_history_grade_sequence"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    grade_id = Column(String(36), ForeignKey("grades.id"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    status = Column(SQLEnum(GradeStatus), nullable=False)
    score = Column(Float, nullable=True)
    letter_grade = Column(String(20), nullable=True)
    feedback = Column(Text, nullable=False, default="")
    actor_id = Column(String(36), nullable=True)
    changed_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    grade = relationship("Grade", back_populates="history")

    def __repr__(self):
        return f"<GradeHistoryEntry(grade_id={self.grade_id}, sequence={self.sequence}, status={self.status})>"
