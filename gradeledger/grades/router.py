"""Grade and student overview endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth.models import CurrentUser
from ..auth.service import get_current_user, require_staff, scope_for
from ..database import get_db
from .overview import StudentOverviewAggregator
from .schemas import (
    AssignmentGradeRow, AssignmentOverviewRow, GradeRelease, GradeResponse, GradeUpsert,
)
from .service import GradeLedger

router = APIRouter(tags=["Grades"])


def get_grade_ledger(db: Session = Depends(get_db)) -> GradeLedger:
    """Dependency to get an instance of GradeLedger."""
    return GradeLedger(db)


def get_overview_aggregator(db: Session = Depends(get_db)) -> StudentOverviewAggregator:
    return StudentOverviewAggregator(db)


def resolve_student_id(path_student_id: str, user: CurrentUser, resource: str) -> str:
    """Students may only look at themselves; staff may look at anyone."""
    if user.is_student:
        if user.user_id != path_student_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Cannot view other students' {resource}",
            )
        return user.user_id
    return path_student_id


def ensure_student_role(user: CurrentUser) -> str:
    if not user.is_student:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only students can access their own shortcut routes",
        )
    return user.user_id


@router.post("/assignments/{assignment_id}/grades", response_model=GradeResponse)
def upsert_grade(
    assignment_id: str,
    payload: GradeUpsert,
    current_user: CurrentUser = Depends(require_staff),
    ledger: GradeLedger = Depends(get_grade_ledger),
):
    """Create or overwrite a student's grade for an assignment."""
    return ledger.upsert_grade(
        assignment_id, payload, actor_id=current_user.user_id, scope=scope_for(current_user)
    )


@router.get("/assignments/{assignment_id}/grades", response_model=List[AssignmentGradeRow])
def list_grades_for_assignment(
    assignment_id: str,
    current_user: CurrentUser = Depends(require_staff),
    ledger: GradeLedger = Depends(get_grade_ledger),
):
    return ledger.list_grades_for_assignment(assignment_id, scope=scope_for(current_user))


@router.post("/grades/{grade_id}/release", response_model=GradeResponse)
def release_grade(
    grade_id: str,
    payload: Optional[GradeRelease] = None,
    current_user: CurrentUser = Depends(require_staff),
    ledger: GradeLedger = Depends(get_grade_ledger),
):
    """Release a grade to its student."""
    return ledger.release_grade(
        grade_id, payload, actor_id=current_user.user_id, scope=scope_for(current_user)
    )


@router.get("/students/me/grades", response_model=List[GradeResponse])
def get_current_student_grades(
    current_user: CurrentUser = Depends(get_current_user),
    ledger: GradeLedger = Depends(get_grade_ledger),
):
    """The caller's grades in every status.

    Draft and pending_release grades are included. Hiding them before release
    is left to the client.
    """
    return ledger.list_grades_for_student(ensure_student_role(current_user))


@router.get("/students/me/assignments", response_model=List[AssignmentOverviewRow])
def get_current_student_assignments(
    current_user: CurrentUser = Depends(get_current_user),
    aggregator: StudentOverviewAggregator = Depends(get_overview_aggregator),
):
    """The caller's assignment feed; grades appear whatever their status."""
    return aggregator.get_student_assignment_overview(ensure_student_role(current_user))


@router.get("/students/{student_id}/grades", response_model=List[GradeResponse])
def get_student_grades(
    student_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    ledger: GradeLedger = Depends(get_grade_ledger),
):
    return ledger.list_grades_for_student(resolve_student_id(student_id, current_user, "grades"))


@router.get("/students/{student_id}/assignments", response_model=List[AssignmentOverviewRow])
def get_student_assignments(
    student_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    aggregator: StudentOverviewAggregator = Depends(get_overview_aggregator),
):
    return aggregator.get_student_assignment_overview(
        resolve_student_id(student_id, current_user, "assignments")
    )
