"""Concurrent writers against one (assignment, student) pair."""
import threading
from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from gradeledger.database import Base
from gradeledger.grades import GradeLedger
from gradeledger.grades.schemas import GradeUpsert
from gradeledger.models import Assignment, ClassEntity, Enrollment, Grade, User, UserRole


@pytest.fixture
def file_engine(tmp_path):
    """Writers need separate connections, so use a database file."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded(file_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    with SessionLocal() as db:
        teacher = User(name="Tom Teacher", email="teacher@example.com", role=UserRole.teacher)
        student = User(name="Sam Student", email="student@example.com", role=UserRole.student)
        db.add_all([teacher, student])
        db.flush()
        class_entity = ClassEntity(title="Algorithms", code="CS101", instructor_ids=[teacher.id])
        db.add(class_entity)
        db.flush()
        assignment = Assignment(
            class_id=class_entity.id, title="Project 1", due_at=datetime(2026, 11, 1, tzinfo=UTC)
        )
        db.add_all([assignment, Enrollment(class_id=class_entity.id, student_id=student.id)])
        db.commit()
        return SessionLocal, assignment.id, student.id


class TestConcurrentUpserts:
    """Racing upserts on one pair."""

    def test_two_writers_produce_one_grade_and_two_history_entries(self, seeded):
        SessionLocal, assignment_id, student_id = seeded
        barrier = threading.Barrier(2, timeout=30)
        errors = []

        def write(score):
            with SessionLocal() as db:
                ledger = GradeLedger(db, notifier=MagicMock())
                barrier.wait()
                try:
                    ledger.upsert_grade(assignment_id, GradeUpsert(student_id=student_id, score=score))
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=write, args=(score,)) for score in (70, 90)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        assert errors == []

        with SessionLocal() as db:
            assert db.scalar(select(func.count()).select_from(Grade)) == 1
            grade = db.scalars(select(Grade)).one()
            assert [entry.sequence for entry in grade.history] == [1, 2]
            assert {entry.score for entry in grade.history} == {70, 90}
            assert grade.score == grade.history[-1].score
