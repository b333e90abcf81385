"""Review group endpoints nested under a class."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.models import CurrentUser
from ..auth.service import require_staff, scope_for
from ..database import get_db
from .schemas import (
    GraderGroupCreate, GraderGroupResponse, GraderGroupUpdate, GroupBundleCreate,
    GroupBundleResponse, StudentGroupCreate, StudentGroupMembersUpdate, StudentGroupResponse,
)
from .service import ReviewGroupCoordinator

router = APIRouter(prefix="/classes", tags=["Review Groups"])


def get_coordinator(db: Session = Depends(get_db)) -> ReviewGroupCoordinator:
    """Dependency to get an instance of ReviewGroupCoordinator."""
    return ReviewGroupCoordinator(db)


@router.post("/{class_id}/student-groups", response_model=StudentGroupResponse, status_code=status.HTTP_201_CREATED)
def create_student_group(
    class_id: str,
    payload: StudentGroupCreate,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    return coordinator.create_student_group(class_id, payload, scope=scope_for(current_user))


@router.get("/{class_id}/student-groups", response_model=List[StudentGroupResponse])
def list_student_groups(
    class_id: str,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    return coordinator.list_student_groups(class_id, scope=scope_for(current_user))


@router.post("/{class_id}/student-groups/{group_id}/members", response_model=StudentGroupResponse)
def update_student_group_members(
    class_id: str,
    group_id: str,
    payload: StudentGroupMembersUpdate,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    """Replace the member list of a student group."""
    return coordinator.update_student_group_members(class_id, group_id, payload, scope=scope_for(current_user))


@router.post("/{class_id}/grader-groups", response_model=GraderGroupResponse, status_code=status.HTTP_201_CREATED)
def create_grader_group(
    class_id: str,
    payload: GraderGroupCreate,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    return coordinator.create_grader_group(class_id, payload, scope=scope_for(current_user))


@router.get("/{class_id}/grader-groups", response_model=List[GraderGroupResponse])
def list_grader_groups(
    class_id: str,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    return coordinator.list_grader_groups(class_id, scope=scope_for(current_user))


@router.patch("/{class_id}/grader-groups/{group_id}", response_model=GraderGroupResponse)
def update_grader_group(
    class_id: str,
    group_id: str,
    payload: GraderGroupUpdate,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    return coordinator.update_grader_group(class_id, group_id, payload, scope=scope_for(current_user))


@router.post("/{class_id}/group-bundles", response_model=GroupBundleResponse, status_code=status.HTTP_201_CREATED)
def create_group_bundle(
    class_id: str,
    payload: GroupBundleCreate,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    """Pair a student group with a grader group."""
    return coordinator.create_group_bundle(class_id, payload, scope=scope_for(current_user))


@router.get("/{class_id}/group-bundles", response_model=List[GroupBundleResponse])
def list_group_bundles(
    class_id: str,
    current_user: CurrentUser = Depends(require_staff),
    coordinator: ReviewGroupCoordinator = Depends(get_coordinator),
):
    return coordinator.list_group_bundles(class_id, scope=scope_for(current_user))
