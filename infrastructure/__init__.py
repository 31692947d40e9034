"""
Infrastructure Layer for the workout logger.

This package contains concrete implementations of the application ports:
- drafts/: local file draft storage
- db/: workout storage behind the sandbox workouts API
- scheduling: timer-backed schedulers for debounced draft saves
- workout_api_client: httpx client for the workouts API
"""

from infrastructure.db import InMemoryWorkoutRepository, SeedFileError
from infrastructure.drafts import FileDraftStorage
from infrastructure.scheduling import AsyncioScheduler, ThreadTimerScheduler
from infrastructure.workout_api_client import (
    TemplateNotFound,
    WorkoutAPIClient,
    WorkoutAPIError,
    WorkoutAPIUnavailable,
)

__all__ = [
    "FileDraftStorage",
    "ThreadTimerScheduler",
    "AsyncioScheduler",
    "WorkoutAPIClient",
    "WorkoutAPIError",
    "WorkoutAPIUnavailable",
    "TemplateNotFound",
    "InMemoryWorkoutRepository",
    "SeedFileError",
]
