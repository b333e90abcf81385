"""Notification sink package."""
from .service import NotificationSink, GRADE_RELEASED

__all__ = ['NotificationSink', 'GRADE_RELEASED']
