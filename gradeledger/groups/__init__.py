"""Review group coordination."""
from .service import ReviewGroupCoordinator
from .router import router as groups_router

__all__ = [
    'ReviewGroupCoordinator',
    'groups_router',
]
