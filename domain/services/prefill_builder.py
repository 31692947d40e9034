"""
Build the prefill document for a template.

Each template exercise gets `sets` suggested sets. The suggestion is the
heaviest set of the most recent logged workout that contains the
exercise; when there is none, the template's own reps and default weight
are used.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from domain.models.prefill import PrefillExercise, SuggestedSet, WorkoutPrefill
from domain.models.session import SetSource
from domain.models.template import TemplateExercise, WorkoutTemplate


@dataclass(frozen=True)
class LoggedSet:
    """A set as persisted by a previous workout."""

    set_index: int
    reps: int
    weight: float


def heaviest_set(sets: Sequence[LoggedSet]) -> Optional[LoggedSet]:
    """Return the heaviest set; the earliest one wins a tie."""
    best: Optional[LoggedSet] = None
    for logged in sets:
        if best is None or logged.weight > best.weight:
            best = logged
    return best


def _suggestion(
    exercise: TemplateExercise, last: Optional[LoggedSet]
) -> tuple:
    if last is not None:
        return last.reps, float(last.weight), SetSource.LAST_WORKOUT
    if exercise.default_weight is not None:
        return exercise.reps, float(exercise.default_weight), SetSource.TEMPLATE_DEFAULT
    return exercise.reps, 0.0, SetSource.DEFAULT


def build_prefill(
    template: WorkoutTemplate,
    last_sets: Mapping[str, Sequence[LoggedSet]],
) -> WorkoutPrefill:
    """
    Build the prefill for a template.

    Args:
        template: Template to log against
        last_sets: Sets of the most recent workout per exercise_id

    Returns:
        WorkoutPrefill with one suggested set per prescribed set
    """
    exercises = []
    for exercise in template.exercises:
        last = heaviest_set(last_sets.get(exercise.exercise_id, ()))
        reps, weight, source = _suggestion(exercise, last)
        exercises.append(
            PrefillExercise(
                exercise_id=exercise.exercise_id,
                exercise_name=exercise.exercise_name,
                position=exercise.position,
                suggested_sets=[
                    SuggestedSet(set_index=i, reps=reps, weight=weight, source=source)
                    for i in range(exercise.sets)
                ],
            )
        )

    return WorkoutPrefill(
        template_id=template.id,
        template_name=template.name,
        exercises=exercises,
    )
