"""
Workout prefill document served for a template.

The prefill carries the template's exercises with suggested starting
values per set, each tagged with where the suggestion came from.
"""

from typing import List

from pydantic import BaseModel, Field

from domain.models.session import SetSource


class SuggestedSet(BaseModel):
    """Suggested starting values for one set."""

    set_index: int = Field(..., ge=0)
    reps: int = Field(..., description="Suggested reps")
    weight: float = Field(..., description="Suggested weight")
    source: SetSource = Field(default=SetSource.DEFAULT, description="Provenance tag")


class PrefillExercise(BaseModel):
    """A template exercise with its suggested sets."""

    exercise_id: str = Field(..., min_length=1)
    exercise_name: str = Field(default="")
    position: int = Field(..., ge=0)
    suggested_sets: List[SuggestedSet] = Field(default_factory=list)


class WorkoutPrefill(BaseModel):
    """
    Prefill response for a template.

    Examples:
        >>> prefill = WorkoutPrefill.model_validate({
        ...     "template_id": "tpl-1",
        ...     "template_name": "Push Day",
        ...     "exercises": [{
        ...         "exercise_id": "ex-1",
        ...         "exercise_name": "Bench Press",
        ...         "position": 0,
        ...         "suggested_sets": [
        ...             {"set_index": 0, "reps": 10, "weight": 60, "source": "last_workout"},
        ...         ],
        ...     }],
        ... })
    """

    template_id: str = Field(..., min_length=1)
    template_name: str = Field(default="")
    exercises: List[PrefillExercise] = Field(default_factory=list)
