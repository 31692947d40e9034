"""
Domain models for the workout logger.

These models are independent of infrastructure concerns (storage,
HTTP, scheduling):
- Session: the aggregate edited while logging a workout
- ExerciseEntry / SetEntry: its exercises and sets
- WorkoutPrefill: suggested starting values served for a template
- CreateWorkoutCommand / CreateWorkoutResponse: submission wire models
- WorkoutTemplate: template read by the sandbox workouts API

Usage:
    >>> from domain.models import Session, WorkoutPrefill

    >>> # Serialize to JSON
    >>> json_str = session.model_dump_json()

    >>> # Deserialize from JSON
    >>> session = Session.model_validate_json(json_str)
"""

from domain.models.prefill import PrefillExercise, SuggestedSet, WorkoutPrefill
from domain.models.session import ExerciseEntry, Session, SetEntry, SetSource, SetValue
from domain.models.submission import (
    CreateWorkoutCommand,
    CreateWorkoutExercise,
    CreateWorkoutResponse,
    CreateWorkoutSet,
    PersonalBestUpdate,
    ValidationErrorDetail,
    ValidationErrorResponse,
    WorkoutExerciseDetail,
    WorkoutSetDetail,
)
from domain.models.template import TemplateExercise, WorkoutTemplate

__all__ = [
    # Session aggregate
    "Session",
    "ExerciseEntry",
    "SetEntry",
    "SetSource",
    "SetValue",
    # Prefill
    "WorkoutPrefill",
    "PrefillExercise",
    "SuggestedSet",
    # Submission
    "CreateWorkoutCommand",
    "CreateWorkoutExercise",
    "CreateWorkoutSet",
    "CreateWorkoutResponse",
    "WorkoutExerciseDetail",
    "WorkoutSetDetail",
    "PersonalBestUpdate",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    # Templates
    "WorkoutTemplate",
    "TemplateExercise",
]
