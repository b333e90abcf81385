"""Per-student feed joining enrollments, assignments, grades, classes and instructors."""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..directory.schemas import InstructorSummary
from ..directory.service import AssignmentCatalog, ClassRegistry, IdentityDirectory
from ..models import Grade
from .schemas import AssignmentOverviewRow, ClassSummary, EffectiveStatus, GradeResponse

logger = logging.getLogger(__name__)


class StudentOverviewAggregator:
    """Read-only; never writes."""

    def __init__(
        self,
        db: Session,
        directory: Optional[IdentityDirectory] = None,
        registry: Optional[ClassRegistry] = None,
        catalog: Optional[AssignmentCatalog] = None,
    ):
        self.db = db
        self.directory = directory or IdentityDirectory(db)
        self.registry = registry or ClassRegistry(db)
        self.catalog = catalog or AssignmentCatalog(db, self.registry)

    def get_student_assignment_overview(self, student_id: str) -> List[AssignmentOverviewRow]:
        """Every assignment of every class the student is enrolled in, soonest due first.

        Assignments due at the same instant keep the catalog's order
        (creation time, then id).
        """
        self.directory.resolve_by_id(student_id)

        enrollments = self.registry.list_enrollments_for_student(student_id)
        if not enrollments:
            return []

        class_ids = list(dict.fromkeys(enrollment.class_id for enrollment in enrollments))
        assignments = self.catalog.list_for_classes(class_ids)
        if not assignments:
            return []

        grades = self.db.scalars(
            select(Grade).where(
                Grade.assignment_id.in_([assignment.id for assignment in assignments]),
                Grade.student_id == student_id,
            )
        ).all()
        grade_by_assignment = {grade.assignment_id: grade for grade in grades}

        classes = self.registry.list_classes(class_ids)
        class_by_id = {class_record.id: class_record for class_record in classes}

        instructor_ids = [
            instructor_id
            for class_record in classes
            for instructor_id in (class_record.instructor_ids or [])
        ]
        instructors = self.directory.profiles_by_id(instructor_ids)

        rows = []
        for assignment in sorted(assignments, key=lambda a: a.due_at):
            grade = grade_by_assignment.get(assignment.id)
            rows.append(AssignmentOverviewRow(
                assignment_id=assignment.id,
                class_id=assignment.class_id,
                title=assignment.title,
                description=assignment.description,
                due_at=assignment.due_at,
                publish_at=assignment.publish_at,
                grading_schema=assignment.grading_schema,
                max_points=assignment.max_points,
                status=EffectiveStatus.for_grade(grade),
                grade=GradeResponse.model_validate(grade) if grade else None,
                class_summary=self._class_summary(class_by_id.get(assignment.class_id), instructors),
            ))
        logger.debug(f"Built overview for student {student_id}: {len(rows)} assignments")
        return rows

    @staticmethod
    def _class_summary(class_record, instructors: dict) -> Optional[ClassSummary]:
        if class_record is None:
            return None
        primary_id = class_record.primary_instructor_id
        primary = instructors.get(primary_id) if primary_id else None
        return ClassSummary(
            class_id=class_record.id,
            title=class_record.title,
            code=class_record.code,
            primary_instructor=InstructorSummary(id=primary.id, name=primary.name, email=primary.email) if primary else None,
        )
