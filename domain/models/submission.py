"""
Wire models for submitting a logged workout.

CreateWorkoutCommand is what the client sends; CreateWorkoutResponse is
what the workouts API answers with on success. Validation failures come
back as a list of ValidationErrorDetail keyed by field path.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CreateWorkoutSet(BaseModel):
    set_index: int
    reps: int
    weight: float


class CreateWorkoutExercise(BaseModel):
    exercise_id: str
    position: int
    sets: List[CreateWorkoutSet] = Field(default_factory=list)


class CreateWorkoutCommand(BaseModel):
    """
    Request body for creating a workout.

    Only carries what the server persists; UI-only state (errors,
    exercise names, completion, provenance) never leaves the client.
    """

    template_id: Optional[str] = None
    logged_at: Optional[datetime] = None
    exercises: List[CreateWorkoutExercise] = Field(default_factory=list)


class WorkoutSetDetail(BaseModel):
    id: str
    workout_exercise_id: str
    set_index: int
    reps: int
    weight: float


class WorkoutExerciseDetail(BaseModel):
    id: str
    workout_id: str
    exercise_id: str
    exercise_name: str = ""
    position: int
    sets: List[WorkoutSetDetail] = Field(default_factory=list)


class PersonalBestUpdate(BaseModel):
    """A new heaviest weight recorded for an exercise."""

    exercise_id: str
    exercise_name: str = ""
    previous_weight: float
    new_weight: float


class CreateWorkoutResponse(BaseModel):
    """Created workout echoed back with any personal-best changes."""

    id: str
    user_id: Optional[str] = None
    template_id: Optional[str] = None
    template_name: Optional[str] = None
    logged_at: datetime
    exercises: List[WorkoutExerciseDetail] = Field(default_factory=list)
    personal_bests_updated: List[PersonalBestUpdate] = Field(default_factory=list)


class ValidationErrorDetail(BaseModel):
    """One server-side violation. `field` is a dotted path into the request."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    error: str = "Validation Error"
    details: List[ValidationErrorDetail] = Field(default_factory=list)
