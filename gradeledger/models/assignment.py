"""Assignment model."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Float, Index, Enum as SQLEnum
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import AssignmentType, GradingSchema


class Assignment(Base):
    """Assignment model."""
    __tablename__ = "assignments"
    __table_args__ = (
        Index("idx_assignments_class_due", "class_id", "due_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    type = Column(SQLEnum(AssignmentType), nullable=False, default=AssignmentType.task)
    due_at = Column(DateTime(timezone=True), nullable=False)
    publish_at = Column(DateTime(timezone=True), nullable=True)
    grading_schema = Column(SQLEnum(GradingSchema), nullable=False, default=GradingSchema.points)
    max_points = Column(Float, nullable=False, default=100)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Assignment(id={self.id}, title='{self.title}')>"
