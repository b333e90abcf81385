"""Review group coordination: student groups, grader groups and the bundles pairing them.

Membership rules are checked synchronously before each write:

* every student group member holds an enrollment in the class
* every grader is listed as an instructor of the class
* both halves of a bundle belong to the bundle's class

They are not re-checked later. A student dropped from a class stays in a group
until someone replaces the member list.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..directory.service import ClassRegistry, IdentityDirectory, unique_ids
from ..errors import Conflict, NotFound
from ..models import ClassEntity, GraderGroup, GroupBundle, StudentGroup
from ..scope import UNRESTRICTED, AuthorizationScope, ensure_permitted
from .schemas import (
    GraderGroupCreate, GraderGroupResponse, GraderGroupUpdate, GroupBundleCreate,
    GroupBundleResponse, StudentGroupCreate, StudentGroupMembersUpdate, StudentGroupResponse,
)

logger = logging.getLogger(__name__)


class ReviewGroupCoordinator:
    """Owns student groups, grader groups and group bundles."""

    def __init__(
        self,
        db: Session,
        directory: Optional[IdentityDirectory] = None,
        registry: Optional[ClassRegistry] = None,
    ):
        self.db = db
        self.directory = directory or IdentityDirectory(db)
        self.registry = registry or ClassRegistry(db)

    # -- validation -------------------------------------------------------

    def _get_class(self, class_id: str, scope: AuthorizationScope) -> ClassEntity:
        class_record = self.registry.get_class(class_id)
        ensure_permitted(scope, class_record.instructor_ids)
        return class_record

    def _ensure_students_enrolled(self, class_id: str, member_ids: List[str]) -> None:
        if not member_ids:
            return
        enrolled = self.registry.enrolled_student_ids(class_id, member_ids)
        missing = [member_id for member_id in member_ids if member_id not in enrolled]
        if missing:
            raise NotFound("One or more students are not enrolled in this class", missing_ids=missing)

    def _ensure_graders_are_instructors(self, class_record: ClassEntity, grader_ids: List[str]) -> None:
        if not grader_ids:
            return
        valid = set(class_record.instructor_ids or [])
        invalid = [grader_id for grader_id in grader_ids if grader_id not in valid]
        if invalid:
            raise NotFound("One or more graders are not instructors for this class", missing_ids=invalid)

    def _commit(self, conflict_message: str) -> None:
        """Commit, turning unique-key violations into Conflict."""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict(conflict_message)
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # -- decoration -------------------------------------------------------

    def _with_members(self, groups: Iterable[StudentGroup]) -> List[StudentGroupResponse]:
        """Attach member profiles using one directory lookup for all groups."""
        groups = list(groups)
        if not groups:
            return []
        profiles = self.directory.profiles_by_id(
            member_id for group in groups for member_id in (group.member_ids or [])
        )
        return [
            StudentGroupResponse.model_validate(group).model_copy(
                update={"members": [profiles.get(member_id) for member_id in (group.member_ids or [])]}
            )
            for group in groups
        ]

    def _with_graders(self, groups: Iterable[GraderGroup]) -> List[GraderGroupResponse]:
        """Attach grader profiles using one directory lookup for all groups."""
        groups = list(groups)
        if not groups:
            return []
        profiles = self.directory.profiles_by_id(
            grader_id for group in groups for grader_id in (group.grader_ids or [])
        )
        return [
            GraderGroupResponse.model_validate(group).model_copy(
                update={"graders": [profiles.get(grader_id) for grader_id in (group.grader_ids or [])]}
            )
            for group in groups
        ]

    def _decorate_bundles(self, bundles: Iterable[GroupBundle]) -> List[GroupBundleResponse]:
        bundles = list(bundles)
        if not bundles:
            return []

        student_group_ids = unique_ids(bundle.student_group_id for bundle in bundles)
        grader_group_ids = unique_ids(bundle.grader_group_id for bundle in bundles)
        student_groups = self.db.scalars(
            select(StudentGroup).where(StudentGroup.id.in_(student_group_ids))
        ).all()
        grader_groups = self.db.scalars(
            select(GraderGroup).where(GraderGroup.id.in_(grader_group_ids))
        ).all()

        student_map = {group.id: group for group in self._with_members(student_groups)}
        grader_map = {group.id: group for group in self._with_graders(grader_groups)}

        return [
            GroupBundleResponse.model_validate(bundle).model_copy(update={
                "student_group": student_map.get(bundle.student_group_id),
                "grader_group": grader_map.get(bundle.grader_group_id),
            })
            for bundle in bundles
        ]

    # -- student groups ---------------------------------------------------

    def create_student_group(
        self,
        class_id: str,
        payload: StudentGroupCreate,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> StudentGroupResponse:
        class_record = self._get_class(class_id, scope)
        member_ids = unique_ids(payload.member_ids or [])
        self._ensure_students_enrolled(class_record.id, member_ids)

        group = StudentGroup(
            class_id=class_record.id,
            name=payload.name,
            description=payload.description or "",
            member_ids=member_ids,
        )
        self.db.add(group)
        self._commit("A student group with this name already exists in the class")
        self.db.refresh(group)

        logger.info(f"Student group {group.id} '{group.name}' created in class {class_record.id} with {len(member_ids)} members")
        return self._with_members([group])[0]

    def list_student_groups(
        self,
        class_id: str,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> List[StudentGroupResponse]:
        class_record = self._get_class(class_id, scope)
        groups = self.db.scalars(
            select(StudentGroup).where(StudentGroup.class_id == class_record.id).order_by(StudentGroup.name)
        ).all()
        return self._with_members(groups)

    def update_student_group_members(
        self,
        class_id: str,
        group_id: str,
        payload: StudentGroupMembersUpdate,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> StudentGroupResponse:
        """Replace the member list wholesale."""
        class_record = self._get_class(class_id, scope)
        member_ids = unique_ids(payload.member_ids)
        self._ensure_students_enrolled(class_record.id, member_ids)

        group = self._find_student_group(class_record.id, group_id)
        group.member_ids = member_ids
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(group)

        logger.info(f"Student group {group.id} members replaced ({len(member_ids)} members)")
        return self._with_members([group])[0]

    def _find_student_group(self, class_id: str, group_id: str) -> StudentGroup:
        group = self.db.scalars(
            select(StudentGroup).where(StudentGroup.id == group_id, StudentGroup.class_id == class_id)
        ).first()
        if group is None:
            raise NotFound("Student group not found for class", missing_ids=[group_id])
        return group

    # -- grader groups ----------------------------------------------------

    def create_grader_group(
        self,
        class_id: str,
        payload: GraderGroupCreate,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> GraderGroupResponse:
        class_record = self._get_class(class_id, scope)
        grader_ids = unique_ids(payload.grader_ids)
        self._ensure_graders_are_instructors(class_record, grader_ids)

        group = GraderGroup(
            class_id=class_record.id,
            name=payload.name,
            description=payload.description or "",
            grader_ids=grader_ids,
        )
        self.db.add(group)
        self._commit("A grader group with this name already exists in the class")
        self.db.refresh(group)

        logger.info(f"Grader group {group.id} '{group.name}' created in class {class_record.id}")
        return self._with_graders([group])[0]

    def list_grader_groups(
        self,
        class_id: str,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> List[GraderGroupResponse]:
        class_record = self._get_class(class_id, scope)
        groups = self.db.scalars(
            select(GraderGroup).where(GraderGroup.class_id == class_record.id).order_by(GraderGroup.name)
        ).all()
        return self._with_graders(groups)

    def update_grader_group(
        self,
        class_id: str,
        group_id: str,
        payload: GraderGroupUpdate,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> GraderGroupResponse:
        """Apply only the fields that were supplied; ``grader_ids`` replaces the list."""
        class_record = self._get_class(class_id, scope)
        grader_ids = None
        if payload.grader_ids is not None:
            grader_ids = unique_ids(payload.grader_ids)
            self._ensure_graders_are_instructors(class_record, grader_ids)

        group = self._find_grader_group(class_record.id, group_id)
        if payload.name is not None:
            group.name = payload.name
        if payload.description is not None:
            group.description = payload.description
        if grader_ids is not None:
            group.grader_ids = grader_ids
        self._commit("A grader group with this name already exists in the class")
        self.db.refresh(group)

        logger.info(f"Grader group {group.id} updated")
        return self._with_graders([group])[0]

    def _find_grader_group(self, class_id: str, group_id: str) -> GraderGroup:
        group = self.db.scalars(
            select(GraderGroup).where(GraderGroup.id == group_id, GraderGroup.class_id == class_id)
        ).first()
        if group is None:
            raise NotFound("Grader group not found for class", missing_ids=[group_id])
        return group

    # -- bundles ----------------------------------------------------------

    def create_group_bundle(
        self,
        class_id: str,
        payload: GroupBundleCreate,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> GroupBundleResponse:
        class_record = self._get_class(class_id, scope)
        student_group = self._find_student_group(class_record.id, payload.student_group_id)
        grader_group = self._find_grader_group(class_record.id, payload.grader_group_id)

        bundle = GroupBundle(
            class_id=class_record.id,
            student_group_id=student_group.id,
            grader_group_id=grader_group.id,
            notes=payload.notes or "",
        )
        self.db.add(bundle)
        self._commit("This student group and grader group are already bundled in the class")
        self.db.refresh(bundle)

        logger.info(f"Group bundle {bundle.id} created in class {class_record.id}")
        return self._decorate_bundles([bundle])[0]

    def list_group_bundles(
        self,
        class_id: str,
        scope: AuthorizationScope = UNRESTRICTED,
    ) -> List[GroupBundleResponse]:
        class_record = self._get_class(class_id, scope)
        bundles = self.db.scalars(
            select(GroupBundle).where(GroupBundle.class_id == class_record.id).order_by(GroupBundle.created_at, GroupBundle.id)
        ).all()
        return self._decorate_bundles(bundles)
