"""Grade ledger and student overview."""
from .service import GradeLedger
from .overview import StudentOverviewAggregator
from .router import router as grades_router

__all__ = [
    'GradeLedger',
    'StudentOverviewAggregator',
    'grades_router',
]
