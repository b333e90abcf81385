"""Read-only collaborators: identity directory, class registry, assignment catalog."""
from .schemas import Profile, InstructorSummary, EnrollmentResponse
from .service import IdentityDirectory, ClassRegistry, AssignmentCatalog

__all__ = [
    'Profile',
    'InstructorSummary',
    'EnrollmentResponse',
    'IdentityDirectory',
    'ClassRegistry',
    'AssignmentCatalog',
]
