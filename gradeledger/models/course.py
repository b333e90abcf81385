"""Class and Enrollment models."""

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import EnrollmentStatus


class ClassEntity(Base):
    """A taught class. ``instructor_ids`` is ordered; the first entry is the primary instructor."""
    __tablename__ = "classes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    code = Column(String(50), unique=True, nullable=False)
    instructor_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    enrollments = relationship("Enrollment", back_populates="class_entity")

    def __repr__(self):
        return f"<ClassEntity(id={self.id}, code='{self.code}')>"

    @property
    def primary_instructor_id(self):
        return self.instructor_ids[0] if self.instructor_ids else None


class Enrollment(Base):
    """A student's membership in a class."""
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("class_id", "student_id", name="uq_enrollments_class_student"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(SQLEnum(EnrollmentStatus), nullable=False, default=EnrollmentStatus.active)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    class_entity = relationship("ClassEntity", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment(class_id={self.class_id}, student_id={self.student_id}, status={self.status})>"
