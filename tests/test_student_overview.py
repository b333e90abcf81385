"""Test cases for the student assignment overview."""
from datetime import datetime, UTC

import pytest

from gradeledger.errors import NotFound
from gradeledger.grades import GradeLedger, StudentOverviewAggregator
from gradeledger.grades.schemas import GradeUpsert
from gradeledger.models import Assignment, ClassEntity, GradeStatus


@pytest.fixture
def aggregator(db_session):
    return StudentOverviewAggregator(db_session)


@pytest.fixture
def make_assignment(db_session):
    def _make(class_entity, title, due_at, created_at=None):
        assignment = Assignment(class_id=class_entity.id, title=title, due_at=due_at)
        if created_at is not None:
            assignment.created_at = created_at
        db_session.add(assignment)
        db_session.commit()
        db_session.refresh(assignment)
        return assignment

    return _make


@pytest.fixture
def second_class(db_session, other_teacher, sample_teacher):
    class_entity = ClassEntity(
        title="Databases",
        code="CS220",
        instructor_ids=[other_teacher.id, sample_teacher.id],
    )
    db_session.add(class_entity)
    db_session.commit()
    db_session.refresh(class_entity)
    return class_entity


class TestStudentAssignmentOverview:
    """Test cases for the per-student feed."""

    def test_rows_from_all_classes_soonest_due_first(
        self, aggregator, db_session, enroll, make_assignment, sample_class, second_class,
        sample_student, sample_enrollment,
    ):
        enroll(second_class, sample_student)
        late = make_assignment(sample_class, "Final project", datetime(2026, 12, 15, tzinfo=UTC))
        early = make_assignment(second_class, "Schema design", datetime(2026, 11, 5, tzinfo=UTC))
        middle = make_assignment(sample_class, "Midterm", datetime(2026, 11, 20, tzinfo=UTC))

        rows = aggregator.get_student_assignment_overview(sample_student.id)

        assert [row.assignment_id for row in rows] == [early.id, middle.id, late.id]

    def test_grade_and_status_attached(
        self, aggregator, db_session, sample_assignment, sample_student, sample_enrollment
    ):
        GradeLedger(db_session).upsert_grade(
            sample_assignment.id, GradeUpsert(student_id=sample_student.id, score=93, letter_grade="A")
        )

        row = aggregator.get_student_assignment_overview(sample_student.id)[0]

        assert row.status.kind == "graded"
        assert row.status.grade_status == GradeStatus.draft
        assert row.grade.score == 93
        assert row.grade.letter_grade == "A"
        assert row.max_points == 100

    def test_ungraded_assignment_has_no_grade_status(
        self, aggregator, sample_assignment, sample_student, sample_enrollment
    ):
        row = aggregator.get_student_assignment_overview(sample_student.id)[0]

        assert row.status.kind == "no_grade"
        assert row.status.has_grade is False
        assert row.grade is None

    def test_class_summary_uses_first_instructor(
        self, aggregator, enroll, make_assignment, second_class, other_teacher, sample_student
    ):
        enroll(second_class, sample_student)
        make_assignment(second_class, "Schema design", datetime(2026, 11, 5, tzinfo=UTC))

        row = aggregator.get_student_assignment_overview(sample_student.id)[0]

        assert row.class_summary.code == "CS220"
        assert row.class_summary.primary_instructor.id == other_teacher.id
        assert row.class_summary.primary_instructor.name == "Olga Other"

    def test_class_without_instructors(
        self, aggregator, db_session, enroll, make_assignment, sample_student
    ):
        orphan = ClassEntity(title="Independent study", code="IS100", instructor_ids=[])
        db_session.add(orphan)
        db_session.commit()
        enroll(orphan, sample_student)
        make_assignment(orphan, "Reading log", datetime(2026, 11, 5, tzinfo=UTC))

        row = aggregator.get_student_assignment_overview(sample_student.id)[0]

        assert row.class_summary.title == "Independent study"
        assert row.class_summary.primary_instructor is None

    def test_same_due_time_keeps_catalog_order(
        self, aggregator, make_assignment, sample_class, sample_student, sample_enrollment
    ):
        due = datetime(2026, 11, 10, tzinfo=UTC)
        first = make_assignment(sample_class, "Part A", due, created_at=datetime(2026, 10, 1, tzinfo=UTC))
        second = make_assignment(sample_class, "Part B", due, created_at=datetime(2026, 10, 2, tzinfo=UTC))

        rows = aggregator.get_student_assignment_overview(sample_student.id)

        assert [row.assignment_id for row in rows] == [first.id, second.id]

    def test_assignments_of_other_classes_excluded(
        self, aggregator, make_assignment, second_class, sample_assignment, sample_student,
        sample_enrollment,
    ):
        make_assignment(second_class, "Not mine", datetime(2026, 11, 5, tzinfo=UTC))

        rows = aggregator.get_student_assignment_overview(sample_student.id)

        assert [row.assignment_id for row in rows] == [sample_assignment.id]

    def test_student_without_enrollments(self, aggregator, sample_student, sample_assignment):
        assert aggregator.get_student_assignment_overview(sample_student.id) == []

    def test_enrolled_class_without_assignments(self, aggregator, sample_student, sample_enrollment):
        assert aggregator.get_student_assignment_overview(sample_student.id) == []

    def test_unknown_student(self, aggregator):
        with pytest.raises(NotFound):
            aggregator.get_student_assignment_overview("ghost")
