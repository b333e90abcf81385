"""Token settings and caller identity schemas."""
import os
from typing import Optional

from pydantic import BaseModel

from ..models.enums import UserRole

# JWT Configuration
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))


class TokenData(BaseModel):
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None


class CurrentUser(BaseModel):
    """The authenticated caller as seen by route handlers."""
    user_id: str
    email: str
    role: UserRole
    name: Optional[str] = None

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.teacher
