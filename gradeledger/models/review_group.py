"""Student group, grader group and group bundle models."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.sql import func
import uuid

from ..database import Base


class StudentGroup(Base):
    """Named set of students within a class."""
    __tablename__ = "student_groups"
    __table_args__ = (
        UniqueConstraint("class_id", "name", name="uq_student_groups_class_name"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    member_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StudentGroup(id={self.id}, name='{self.name}')>"


class GraderGroup(Base):
    """Named set of grading staff within a class."""
    __tablename__ = "grader_groups"
    __table_args__ = (
        UniqueConstraint("class_id", "name", name="uq_grader_groups_class_name"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    grader_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<GraderGroup(id={self.id}, name='{self.name}')>"


class GroupBundle(Base):
    """Pairs one student group with one grader group inside a class."""
    __tablename__ = "group_bundles"
    __table_args__ = (
        UniqueConstraint(
            "class_id", "student_group_id", "grader_group_id",
            name="uq_group_bundles_class_groups",
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False, index=True)
    student_group_id = Column(String(36), ForeignKey("student_groups.id"), nullable=False)
    grader_group_id = Column(String(36), ForeignKey("grader_groups.id"), nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<GroupBundle(id={self.id}, class_id={self.class_id})>"
