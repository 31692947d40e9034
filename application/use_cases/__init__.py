"""
Application Use Cases for the workouts API.

Use cases orchestrate domain services and repository ports. Dependencies
are injected via constructors for testability, and results are returned
as dataclasses rather than API responses.

Usage:
    from application.use_cases import CreateWorkoutUseCase, GetWorkoutPrefillUseCase

    prefill = GetWorkoutPrefillUseCase(workout_repo=repo).execute(
        "tpl-1", user_id="user-123"
    )
    created = CreateWorkoutUseCase(workout_repo=repo).execute(
        user_id="user-123", command=command
    )
"""

from application.use_cases.log_workout import (
    CreateWorkoutResult,
    CreateWorkoutUseCase,
    GetPrefillResult,
    GetWorkoutPrefillUseCase,
)

__all__ = [
    "GetWorkoutPrefillUseCase",
    "GetPrefillResult",
    "CreateWorkoutUseCase",
    "CreateWorkoutResult",
]
