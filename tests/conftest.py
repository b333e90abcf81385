"""Test configuration and fixtures."""

from datetime import datetime, UTC

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradeledger.database import Base
from gradeledger.models import (
    Assignment, ClassEntity, Enrollment, EnrollmentStatus, User, UserRole,
)


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """Create a fresh test database engine per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    """Factory for directory users."""
    counter = {"n": 0}

    def _make(name, role=UserRole.student, email=None):
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"user{counter['n']}@example.com",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def enroll(db_session):
    """Factory for enrollments."""
    def _enroll(class_entity, student, status=EnrollmentStatus.active):
        enrollment = Enrollment(class_id=class_entity.id, student_id=student.id, status=status)
        db_session.add(enrollment)
        db_session.commit()
        db_session.refresh(enrollment)
        return enrollment

    return _enroll


@pytest.fixture
def sample_admin(make_user):
    return make_user("Ada Admin", role=UserRole.admin, email="admin@example.com")


@pytest.fixture
def sample_teacher(make_user):
    return make_user("Tom Teacher", role=UserRole.teacher, email="teacher@example.com")


@pytest.fixture
def other_teacher(make_user):
    return make_user("Olga Other", role=UserRole.teacher, email="other.teacher@example.com")


@pytest.fixture
def sample_student(make_user):
    return make_user("Sam Student", role=UserRole.student, email="student@example.com")


@pytest.fixture
def sample_class(db_session, sample_teacher):
    """A class taught by ``sample_teacher``."""
    class_entity = ClassEntity(
        title="Algorithms",
        code="CS101",
        instructor_ids=[sample_teacher.id],
    )
    db_session.add(class_entity)
    db_session.commit()
    db_session.refresh(class_entity)
    return class_entity


@pytest.fixture
def sample_enrollment(enroll, sample_class, sample_student):
    return enroll(sample_class, sample_student)


@pytest.fixture
def sample_assignment(db_session, sample_class):
    """Assignment A in class C with max_points=100."""
    assignment = Assignment(
        class_id=sample_class.id,
        title="Project 1",
        description="Implement a priority queue",
        due_at=datetime(2026, 11, 1, 17, 0, tzinfo=UTC),
        max_points=100,
    )
    db_session.add(assignment)
    db_session.commit()
    db_session.refresh(assignment)
    return assignment
