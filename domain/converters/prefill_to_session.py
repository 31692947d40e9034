"""
Converter: template prefill (WorkoutPrefill) to a fresh Session.
"""

from datetime import datetime, timezone
from typing import Optional

from domain.models import ExerciseEntry, Session, SetEntry, WorkoutPrefill


def prefill_to_session(
    prefill: WorkoutPrefill,
    *,
    now: Optional[datetime] = None,
) -> Session:
    """
    Build the initial session for a template.

    Suggested values become the set values, the provenance tag is kept
    on each set and no set carries an error yet. Pure apart from reading
    the clock; never touches draft storage.

    Args:
        prefill: Prefill document for the template.
        now: Timestamp to use as logged_at (defaults to current UTC time).

    Returns:
        New Session with logged_at fixed to `now`.
    """
    logged_at = now or datetime.now(timezone.utc)

    exercises = [
        ExerciseEntry(
            exercise_id=exercise.exercise_id,
            exercise_name=exercise.exercise_name,
            position=exercise.position,
            sets=[
                SetEntry(
                    set_index=suggested.set_index,
                    reps=suggested.reps,
                    weight=suggested.weight,
                    error=None,
                    source=suggested.source,
                )
                for suggested in sorted(exercise.suggested_sets, key=lambda s: s.set_index)
            ],
        )
        for exercise in prefill.exercises
    ]

    return Session(
        template_id=prefill.template_id,
        template_name=prefill.template_name,
        logged_at=logged_at,
        exercises=exercises,
    )
