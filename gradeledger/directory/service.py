"""Read-only collaborators the grading engine consults.

These wrap records the engine never mutates: user profiles, classes with their
enrollments, and the assignment catalog. Each is built per request around the
request's session, so nothing here caches across requests.
"""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models import Assignment, ClassEntity, Enrollment, User
from ..scope import AuthorizationScope, ensure_permitted
from .schemas import Profile

logger = logging.getLogger(__name__)


def unique_ids(ids: Iterable[Optional[str]]) -> List[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen = {}
    for value in ids:
        if value:
            seen.setdefault(str(value), None)
    return list(seen)


class IdentityDirectory:
    """Resolves user ids to profiles."""

    def __init__(self, db: Session):
        self.db = db

    def resolve_by_id(self, user_id: str) -> Profile:
        """Return the profile for ``user_id`` or raise NotFound."""
        user = self.db.get(User, user_id) if user_id else None
        if user is None:
            raise NotFound("User not found", missing_ids=[user_id])
        return Profile.model_validate(user)

    def resolve_by_email(self, email: str) -> Profile:
        user = self.db.scalars(select(User).where(User.email == email)).first() if email else None
        if user is None:
            raise NotFound("User not found", missing_ids=[email])
        return Profile.model_validate(user)

    def resolve_many(self, user_ids: Iterable[str]) -> List[Profile]:
        """Resolve many ids in one query; unknown ids are silently dropped."""
        ids = unique_ids(user_ids)
        if not ids:
            return []
        users = self.db.scalars(select(User).where(User.id.in_(ids))).all()
        if len(users) < len(ids):
            logger.debug(f"Directory resolved {len(users)} of {len(ids)} requested users")
        return [Profile.model_validate(user) for user in users]

    def profiles_by_id(self, user_ids: Iterable[str]) -> Dict[str, Profile]:
        return {profile.id: profile for profile in self.resolve_many(user_ids)}


class ClassRegistry:
    """Classes, their instructors, and enrollments."""

    def __init__(self, db: Session):
        self.db = db

    def get_class(self, class_id: str) -> ClassEntity:
        record = self.db.get(ClassEntity, class_id) if class_id else None
        if record is None:
            raise NotFound("Class not found", missing_ids=[class_id])
        return record

    def list_classes(self, class_ids: Iterable[str]) -> List[ClassEntity]:
        ids = unique_ids(class_ids)
        if not ids:
            return []
        return list(self.db.scalars(select(ClassEntity).where(ClassEntity.id.in_(ids))).all())

    def find_enrollment(self, class_id: str, student_id: str) -> Optional[Enrollment]:
        return self.db.scalars(
            select(Enrollment).where(
                Enrollment.class_id == class_id,
                Enrollment.student_id == student_id,
            )
        ).first()

    def list_enrollments_for_class(self, class_id: str) -> List[Enrollment]:
        return list(self.db.scalars(
            select(Enrollment).where(Enrollment.class_id == class_id).order_by(Enrollment.created_at, Enrollment.id)
        ).all())

    def list_enrollments_for_student(self, student_id: str) -> List[Enrollment]:
        return list(self.db.scalars(
            select(Enrollment).where(Enrollment.student_id == student_id).order_by(Enrollment.created_at, Enrollment.id)
        ).all())

    def enrolled_student_ids(self, class_id: str, student_ids: Iterable[str]) -> set:
        """Subset of ``student_ids`` that hold an enrollment row in the class, any status."""
        ids = unique_ids(student_ids)
        if not ids:
            return set()
        rows = self.db.scalars(
            select(Enrollment.student_id).where(
                Enrollment.class_id == class_id,
                Enrollment.student_id.in_(ids),
            )
        ).all()
        return set(rows)


class AssignmentCatalog:
    """Assignment metadata lookups, optionally narrowed to an instructor."""

    def __init__(self, db: Session, registry: Optional[ClassRegistry] = None):
        self.db = db
        self.registry = registry or ClassRegistry(db)

    def find_by_id(self, assignment_id: str) -> Assignment:
        assignment = self.db.get(Assignment, assignment_id) if assignment_id else None
        if assignment is None:
            raise NotFound("Assignment not found", missing_ids=[assignment_id])
        return assignment

    def find_by_id_scoped(self, assignment_id: str, scope: AuthorizationScope) -> Assignment:
        """Resolve an assignment, failing Forbidden when the scope excludes its class."""
        assignment = self.find_by_id(assignment_id)
        class_record = self.registry.get_class(assignment.class_id)
        ensure_permitted(scope, class_record.instructor_ids, what="assignment's class")
        return assignment

    def list_for_classes(self, class_ids: Iterable[str]) -> List[Assignment]:
        """Assignments of the given classes in catalog order (creation time, then id)."""
        ids = unique_ids(class_ids)
        if not ids:
            return []
        return list(self.db.scalars(
            select(Assignment)
            .where(Assignment.class_id.in_(ids))
            .order_by(Assignment.created_at, Assignment.id)
        ).all())
