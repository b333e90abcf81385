"""Grading lifecycle and review-group coordination engine."""

__version__ = "0.1.0"
