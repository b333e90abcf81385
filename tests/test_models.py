"""Test cases for database models."""
from datetime import datetime, UTC

import pytest
from sqlalchemy.exc import IntegrityError

from gradeledger.models import (
    ClassEntity, Enrollment, Grade, GradeHistoryEntry, GradeStatus, StudentGroup, User, UserRole,
)


class TestUserModel:
    """Test cases for User model."""

    def test_role_properties(self, sample_teacher, sample_student, sample_admin):
        assert sample_teacher.is_teacher
        assert sample_student.is_student
        assert sample_admin.is_admin
        assert not sample_student.is_teacher

    def test_email_unique(self, db_session, sample_student):
        db_session.add(User(name="Copy", email=sample_student.email, role=UserRole.student))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestClassModel:
    """Test cases for ClassEntity and Enrollment."""

    def test_primary_instructor_is_first(self, db_session, sample_teacher, other_teacher):
        class_entity = ClassEntity(title="Networks", code="CS340", instructor_ids=[other_teacher.id, sample_teacher.id])
        db_session.add(class_entity)
        db_session.commit()

        assert class_entity.primary_instructor_id == other_teacher.id

    def test_primary_instructor_absent(self, db_session):
        class_entity = ClassEntity(title="Networks", code="CS340", instructor_ids=[])
        db_session.add(class_entity)
        db_session.commit()

        assert class_entity.primary_instructor_id is None

    def test_single_enrollment_per_student(self, db_session, sample_class, sample_student, sample_enrollment):
        db_session.add(Enrollment(class_id=sample_class.id, student_id=sample_student.id))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestGradeModel:
    """Test cases for Grade and GradeHistoryEntry."""

    def test_defaults(self, db_session, sample_assignment, sample_student):
        grade = Grade(assignment_id=sample_assignment.id, student_id=sample_student.id)
        db_session.add(grade)
        db_session.commit()
        db_session.refresh(grade)

        assert grade.status == GradeStatus.draft
        assert grade.feedback == ""
        assert grade.revision == 0
        assert grade.history == []
        assert not grade.is_released

    def test_one_grade_per_pair(self, db_session, sample_assignment, sample_student):
        db_session.add(Grade(assignment_id=sample_assignment.id, student_id=sample_student.id))
        db_session.commit()

        db_session.add(Grade(assignment_id=sample_assignment.id, student_id=sample_student.id))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_history_sequence_unique_per_grade(self, db_session, sample_assignment, sample_student):
        grade = Grade(assignment_id=sample_assignment.id, student_id=sample_student.id)
        db_session.add(grade)
        db_session.commit()

        now = datetime.now(UTC)
        db_session.add(GradeHistoryEntry(grade_id=grade.id, sequence=1, status=GradeStatus.draft, changed_at=now))
        db_session.commit()

        db_session.add(GradeHistoryEntry(grade_id=grade.id, sequence=1, status=GradeStatus.draft, changed_at=now))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestReviewGroupModels:
    """Test cases for review group models."""

    def test_group_name_unique_per_class(self, db_session, sample_class):
        db_session.add(StudentGroup(class_id=sample_class.id, name="Team 1", member_ids=[]))
        db_session.commit()

        db_session.add(StudentGroup(class_id=sample_class.id, name="Team 1", member_ids=[]))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
