"""
Domain layer for the workout logger.

This package contains pure domain models, converters and validation
rules that are independent of infrastructure concerns (storage, HTTP,
timers).
"""

from domain.models import (
    ExerciseEntry,
    Session,
    SetEntry,
    SetSource,
    WorkoutPrefill,
)

__all__ = [
    "ExerciseEntry",
    "Session",
    "SetEntry",
    "SetSource",
    "WorkoutPrefill",
]
