"""Typed failures raised by the grading engine.

Callers can tell "doesn't exist" from "exists but you can't touch it" from
"already exists under that name" without ever seeing storage error text.
"""

from typing import Iterable, List, Optional


class GradingError(Exception):
    """Base exception for grading engine errors."""
    code = "E_GRADING"

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class NotFound(GradingError):
    """Raised when a referenced record does not exist."""
    code = "E_NOT_FOUND"

    def __init__(self, message: str = "", missing_ids: Optional[Iterable[str]] = None):
        self.missing_ids: List[str] = list(missing_ids or [])
        super().__init__(message or "Resource not found")


class Forbidden(GradingError):
    """Raised when an instructor-scoped caller is not assigned to the resource."""
    code = "E_FORBIDDEN"

    def __init__(self, message: str = ""):
        super().__init__(message or "Not allowed to access this resource")


class Conflict(GradingError):
    """Raised on a unique-key violation."""
    code = "E_CONFLICT"

    def __init__(self, message: str = ""):
        super().__init__(message or "Resource already exists")
