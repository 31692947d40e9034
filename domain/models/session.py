"""
Workout logging session - the aggregate edited while a workout is logged.

A Session is created from a template prefill (or resumed from a local
draft) and mutated set by set until it is submitted or abandoned.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

# Reps/weight as entered. None is the "unset" sentinel; NaN and inf are
# refused since JSON drafts would write them as null.
SetValue = Optional[Union[int, Annotated[float, Field(allow_inf_nan=False)]]]


class SetSource(str, Enum):
    """Where the starting value of a set came from."""

    LAST_WORKOUT = "last_workout"
    PERSONAL_BEST = "personal_best"
    TEMPLATE_DEFAULT = "template_default"
    DEFAULT = "default"


class SetEntry(BaseModel):
    """
    One set being logged.

    `error` is None when the set is valid. It is recomputed whenever
    reps or weight change, so it never goes stale relative to the values.
    """

    set_index: int = Field(..., ge=0, description="0-based position within the exercise")
    reps: SetValue = Field(default=None, description="Reps performed (None = unset)")
    weight: SetValue = Field(default=None, description="Weight lifted (None = unset)")
    error: Optional[str] = Field(default=None, description="Validation message, None when valid")
    source: Optional[SetSource] = Field(
        default=None, description="Provenance of the initial value (informational)"
    )

    @property
    def is_filled(self) -> bool:
        """True when both reps and weight are populated."""
        return self.reps is not None and self.weight is not None

    @property
    def is_valid(self) -> bool:
        """True when the set is populated and carries no error."""
        return self.is_filled and self.error is None


class ExerciseEntry(BaseModel):
    """An exercise in the session with its fixed list of sets."""

    exercise_id: str = Field(..., min_length=1)
    exercise_name: str = Field(default="")
    position: int = Field(..., ge=0, description="Position in the template, never renumbered")
    sets: List[SetEntry] = Field(default_factory=list)

    @field_validator("sets")
    @classmethod
    def validate_set_indices(cls, v: List[SetEntry]) -> List[SetEntry]:
        """Set indices must be 0..n-1 in order."""
        indices = [s.set_index for s in v]
        if indices != list(range(len(v))):
            raise ValueError(f"Set indices must be contiguous from 0, got {indices}")
        return v

    @property
    def completed(self) -> bool:
        """
        Derived completion flag.

        True iff every set has both fields populated and no validation error.
        Never stored, so it can't disagree with the sets.
        """
        return all(s.is_valid for s in self.sets)


class Session(BaseModel):
    """
    Aggregate root for one workout logging attempt.

    The shape (number of exercises, their positions, number of sets and
    their indices) is fixed at creation. Only reps, weight and error of
    individual sets change afterwards.

    Examples:
        >>> session = Session(
        ...     template_id="tpl-1",
        ...     template_name="Push Day",
        ...     logged_at=datetime(2026, 1, 5, 18, 30),
        ...     exercises=[
        ...         ExerciseEntry(
        ...             exercise_id="ex-1",
        ...             exercise_name="Bench Press",
        ...             position=0,
        ...             sets=[SetEntry(set_index=0, reps=10, weight=60)],
        ...         )
        ...     ],
        ... )
        >>> session.exercises[0].completed
        True
    """

    template_id: str = Field(..., min_length=1, description="Template the session was created from")
    template_name: str = Field(default="", description="Display name of the template")
    logged_at: datetime = Field(..., description="Fixed at session creation")
    exercises: List[ExerciseEntry] = Field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercises)

    @property
    def completed_exercises(self) -> int:
        return sum(1 for e in self.exercises if e.completed)

    def get_set(self, exercise_index: int, set_index: int) -> SetEntry:
        """
        Look up a set by position.

        Raises:
            IndexError: If either index is outside the session's bounds.
        """
        if not 0 <= exercise_index < len(self.exercises):
            raise IndexError(f"Exercise index {exercise_index} out of range")
        sets = self.exercises[exercise_index].sets
        if not 0 <= set_index < len(sets):
            raise IndexError(
                f"Set index {set_index} out of range for exercise {exercise_index}"
            )
        return sets[set_index]

    def has_set(self, exercise_index: int, set_index: int) -> bool:
        return 0 <= exercise_index < len(self.exercises) and 0 <= set_index < len(
            self.exercises[exercise_index].sets
        )
