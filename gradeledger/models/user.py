"""User model backing the identity directory."""

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import UserRole, UserStatus


class User(Base):
    """Directory record for a person; password material lives elsewhere."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)
    status = Column(SQLEnum(UserStatus), nullable=False, default=UserStatus.active)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.teacher

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student
