"""Grade ledger: per-(assignment, student) grades with an append-only history."""
import logging
import uuid
from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import insert_if_absent
from ..directory.schemas import EnrollmentResponse
from ..directory.service import AssignmentCatalog, ClassRegistry, IdentityDirectory
from ..errors import NotFound
from ..models import Assignment, Grade, GradeHistoryEntry, GradeStatus
from ..notifications.service import NotificationSink
from ..scope import UNRESTRICTED, AuthorizationScope, RestrictedToInstructor
from .schemas import (
    AssignmentGradeRow, EffectiveStatus, GradeRelease, GradeResponse, GradeUpsert,
)

logger = logging.getLogger(__name__)


def student_sort_key(student_id: str, profiles: dict):
    """Named students first (case-insensitive), then unnamed ones; ties by raw id."""
    profile = profiles.get(student_id)
    name = profile.name if profile else None
    if name:
        return (0, name.casefold(), student_id)
    return (1, "", student_id)


class GradeLedger:
    """Owns grade records, their status, and their history."""

    def __init__(
        self,
        db: Session,
        directory: Optional[IdentityDirectory] = None,
        registry: Optional[ClassRegistry] = None,
        catalog: Optional[AssignmentCatalog] = None,
        notifier: Optional[NotificationSink] = None,
    ):
        self.db = db
        self.directory = directory or IdentityDirectory(db)
        self.registry = registry or ClassRegistry(db)
        self.catalog = catalog or AssignmentCatalog(db, self.registry)
        self.notifier = notifier or NotificationSink(db)

    def _resolve_assignment(self, assignment_id: str, scope: AuthorizationScope) -> Assignment:
        if isinstance(scope, RestrictedToInstructor):
            return self.catalog.find_by_id_scoped(assignment_id, scope)
        return self.catalog.find_by_id(assignment_id)

    def get_grade(self, grade_id: str) -> Grade:
        """Fetch a grade with its history or raise NotFound."""
        grade = self.db.get(Grade, grade_id) if grade_id else None
        if grade is None:
            raise NotFound("Grade not found", missing_ids=[grade_id])
        return grade

    def upsert_grade(
        self,
        assignment_id: str,
        payload: GradeUpsert,
        actor_id: Optional[str] = None,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> Grade:
        """Create or overwrite the grade for one student and append a history entry.

        The insert-if-absent, the counter bump and the history insert share one
        transaction. The ``UPDATE`` holds the row lock, so two writers on the same
        pair serialize and each gets its own history sequence number.
        """
        assignment = self._resolve_assignment(assignment_id, scope)
        self.directory.resolve_by_id(payload.student_id)

        if self.registry.find_enrollment(assignment.class_id, payload.student_id) is None:
            raise NotFound("Student is not enrolled in this class", missing_ids=[payload.student_id])

        status = payload.status or GradeStatus.draft
        feedback = payload.feedback if payload.feedback is not None else ""
        now = datetime.now(UTC)
        key = (Grade.assignment_id == assignment.id, Grade.student_id == payload.student_id)

        try:
            insert_if_absent(
                self.db,
                Grade,
                {
                    "id": str(uuid.uuid4()),
                    "assignment_id": assignment.id,
                    "student_id": payload.student_id,
                    "feedback": "",
                    "status": GradeStatus.draft,
                    "revision": 0,
                    "created_at": now,
                    "updated_at": now,
                },
                index_elements=["assignment_id", "student_id"],
            )
            self.db.execute(
                update(Grade)
                .where(*key)
                .values(
                    score=payload.score,
                    letter_grade=payload.letter_grade,
                    feedback=feedback,
                    status=status,
                    revision=Grade.revision + 1,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            grade_id, revision = self.db.execute(select(Grade.id, Grade.revision).where(*key)).one()
            self.db.add(GradeHistoryEntry(
                grade_id=grade_id,
                sequence=revision,
                status=status,
                score=payload.score,
                letter_grade=payload.letter_grade,
                feedback=feedback,
                actor_id=actor_id,
                changed_at=now,
            ))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(f"Grade {grade_id} upserted for student {payload.student_id} on assignment {assignment.id} [{status.value}]")
        return self.get_grade(grade_id)

    def list_grades_for_assignment(
        self,
        assignment_id: str,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> List[AssignmentGradeRow]:
        """One row per enrolled or graded student, ordered by display name."""
        assignment = self._resolve_assignment(assignment_id, scope)

        grades = self.db.scalars(select(Grade).where(Grade.assignment_id == assignment.id)).all()
        enrollments = self.registry.list_enrollments_for_class(assignment.class_id)

        enrollment_by_student = {enrollment.student_id: enrollment for enrollment in enrollments}
        grade_by_student = {grade.student_id: grade for grade in grades}

        # A grade can outlive its enrollment; the union keeps it visible.
        student_ids = list(dict.fromkeys(
            [enrollment.student_id for enrollment in enrollments] + [grade.student_id for grade in grades]
        ))
        if not student_ids:
            return []

        profiles = self.directory.profiles_by_id(student_ids)
        rows = []
        for student_id in sorted(student_ids, key=lambda sid: student_sort_key(sid, profiles)):
            grade = grade_by_student.get(student_id)
            enrollment = enrollment_by_student.get(student_id)
            rows.append(AssignmentGradeRow(
                student_id=student_id,
                student=profiles.get(student_id),
                enrollment=EnrollmentResponse.model_validate(enrollment) if enrollment else None,
                status=EffectiveStatus.for_grade(grade),
                grade=GradeResponse.model_validate(grade) if grade else None,
            ))
        return rows

    def list_grades_for_student(self, student_id: str) -> List[Grade]:
        self.directory.resolve_by_id(student_id)
        return list(self.db.scalars(
            select(Grade).where(Grade.student_id == student_id).order_by(Grade.created_at, Grade.id)
        ).all())

    def release_grade(
        self,
        grade_id: str,
        payload: Optional[GradeRelease] = None,
        actor_id: Optional[str] = None,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> Grade:
        """Mark a grade released and notify the student.

        Releasing again is allowed and appends another entry. Enrollment is not
        re-checked here. Notification runs after the commit and its failures are
        only logged.
        """
        payload = payload or GradeRelease()
        grade = self.get_grade(grade_id)
        if isinstance(scope, RestrictedToInstructor):
            self.catalog.find_by_id_scoped(grade.assignment_id, scope)

        release_at = payload.release_at or datetime.now(UTC)
        values = {
            "status": GradeStatus.released,
            "released_at": release_at,
            "revision": Grade.revision + 1,
            "updated_at": datetime.now(UTC),
        }
        if payload.feedback is not None:
            values["feedback"] = payload.feedback

        try:
            self.db.execute(
                update(Grade)
                .where(Grade.id == grade_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            current = self.db.execute(
                select(Grade.revision, Grade.score, Grade.letter_grade, Grade.feedback)
                .where(Grade.id == grade_id)
            ).one()
            self.db.add(GradeHistoryEntry(
                grade_id=grade_id,
                sequence=current.revision,
                status=GradeStatus.released,
                score=current.score,
                letter_grade=current.letter_grade,
                feedback=current.feedback or "",
                actor_id=actor_id,
                changed_at=release_at,
            ))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(f"Grade {grade_id} released (revision {current.revision})")
        self._notify_release(grade_id)
        return self.get_grade(grade_id)

    def _notify_release(self, grade_id: str) -> None:
        """Tell the student about a release; never lets a sink failure escape."""
        try:
            grade = self.get_grade(grade_id)
            assignment = self.catalog.find_by_id(grade.assignment_id)
            self.notifier.notify_grade_release(
                student_id=grade.student_id,
                assignment_title=assignment.title,
                class_id=assignment.class_id,
                score=grade.score,
                letter_grade=grade.letter_grade,
            )
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Grade release notification failed for grade {grade_id}: {e}", exc_info=True)
