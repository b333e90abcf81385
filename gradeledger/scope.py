"""Authorization scope threaded through every ledger and coordinator call."""

from dataclasses import dataclass
from typing import Iterable, Union

from .errors import Forbidden


@dataclass(frozen=True)
class Unrestricted:
    """Admin-level access: no instructor check."""

    def permits(self, instructor_ids: Iterable[str]) -> bool:
        return True


@dataclass(frozen=True)
class RestrictedToInstructor:
    """Access narrowed to classes the given instructor teaches."""
    instructor_id: str

    def permits(self, instructor_ids: Iterable[str]) -> bool:
        return self.instructor_id in set(instructor_ids or [])


AuthorizationScope = Union[Unrestricted, RestrictedToInstructor]

UNRESTRICTED = Unrestricted()


def ensure_permitted(scope: AuthorizationScope, instructor_ids: Iterable[str], what: str = "class") -> None:
    """Raise Forbidden unless the scope allows acting on a class with these instructors."""
    if not scope.permits(instructor_ids):
        raise Forbidden(f"Instructor is not assigned to this {what}")
