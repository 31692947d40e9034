"""
Pydantic schemas for API requests and responses.

Organized by feature/domain:
- workouts: workout creation request and error bodies
"""

from api.schemas.workouts import (
    CreateWorkoutExerciseRequest,
    CreateWorkoutRequest,
    CreateWorkoutSetRequest,
    ErrorResponse,
)

__all__ = [
    "CreateWorkoutRequest",
    "CreateWorkoutExerciseRequest",
    "CreateWorkoutSetRequest",
    "ErrorResponse",
]
