"""
Pydantic models for the workouts API.

CreateWorkoutRequest enforces the template rules (reps 1-99 whole,
weight 0-999.99 with at most two decimals). Per-set errors are raised on
the offending field so the error location reads
exercises.<i>.sets.<j>.<field>.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from domain.models.submission import (
    CreateWorkoutCommand,
    CreateWorkoutExercise,
    CreateWorkoutSet,
)
from domain.services.set_validator import TEMPLATE_SET_RULES

MAX_SETS_PER_EXERCISE = 20
MAX_EXERCISES_PER_WORKOUT = 50


def _require_number(value: Any, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", f"{field_name} must be a number.")


class CreateWorkoutSetRequest(BaseModel):
    """One set of a workout being created."""

    set_index: int = Field(..., ge=0)
    reps: int
    weight: float

    @field_validator("reps", mode="before")
    @classmethod
    def validate_reps(cls, v: Any) -> int:
        _require_number(v, "Reps")
        error = TEMPLATE_SET_RULES.check_reps(v)
        if error:
            raise PydanticCustomError("reps", error)
        return int(v)

    @field_validator("weight", mode="before")
    @classmethod
    def validate_weight(cls, v: Any) -> float:
        _require_number(v, "Weight")
        error = TEMPLATE_SET_RULES.check_weight(v)
        if error:
            raise PydanticCustomError("weight", error)
        return float(v)


class CreateWorkoutExerciseRequest(BaseModel):
    """One exercise of a workout being created."""

    exercise_id: str = Field(..., min_length=1)
    position: int = Field(..., ge=0)
    sets: List[CreateWorkoutSetRequest] = Field(
        ..., min_length=1, max_length=MAX_SETS_PER_EXERCISE
    )

    @field_validator("sets")
    @classmethod
    def validate_unique_set_indices(
        cls, v: List[CreateWorkoutSetRequest]
    ) -> List[CreateWorkoutSetRequest]:
        indices = [s.set_index for s in v]
        if len(indices) != len(set(indices)):
            raise PydanticCustomError("unique", "Set indices must be unique within exercise.")
        return v


class CreateWorkoutRequest(BaseModel):
    """Request for creating a workout."""

    template_id: Optional[str] = None
    logged_at: Optional[datetime] = None
    exercises: List[CreateWorkoutExerciseRequest] = Field(
        ..., min_length=1, max_length=MAX_EXERCISES_PER_WORKOUT
    )

    @field_validator("exercises")
    @classmethod
    def validate_unique_positions(
        cls, v: List[CreateWorkoutExerciseRequest]
    ) -> List[CreateWorkoutExerciseRequest]:
        positions = [e.position for e in v]
        if len(positions) != len(set(positions)):
            raise PydanticCustomError(
                "unique", "Exercise positions must be unique within workout."
            )
        return v

    def to_command(self) -> CreateWorkoutCommand:
        return CreateWorkoutCommand(
            template_id=self.template_id,
            logged_at=self.logged_at,
            exercises=[
                CreateWorkoutExercise(
                    exercise_id=e.exercise_id,
                    position=e.position,
                    sets=[
                        CreateWorkoutSet(set_index=s.set_index, reps=s.reps, weight=s.weight)
                        for s in e.sets
                    ],
                )
                for e in self.exercises
            ],
        )


class ErrorResponse(BaseModel):
    """Body of non-validation error responses."""

    error: str
    message: str
