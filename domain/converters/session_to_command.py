"""
Converter: Session to the CreateWorkoutCommand sent to the workouts API.
"""

from domain.models import (
    CreateWorkoutCommand,
    CreateWorkoutExercise,
    CreateWorkoutSet,
    Session,
)


def session_to_command(session: Session) -> CreateWorkoutCommand:
    """
    Strip a validated session down to what the server persists.

    Error messages, exercise names, completion and provenance are UI
    state and are dropped. Reps are sent as integers.

    Raises:
        ValueError: If a set is still unset (callers validate first).
    """
    exercises = []
    for exercise in session.exercises:
        sets = []
        for entry in exercise.sets:
            if entry.reps is None or entry.weight is None:
                raise ValueError(
                    f"Set {entry.set_index} of exercise {exercise.position} is incomplete"
                )
            sets.append(
                CreateWorkoutSet(
                    set_index=entry.set_index,
                    reps=int(entry.reps),
                    weight=float(entry.weight),
                )
            )
        exercises.append(
            CreateWorkoutExercise(
                exercise_id=exercise.exercise_id,
                position=exercise.position,
                sets=sets,
            )
        )

    return CreateWorkoutCommand(
        template_id=session.template_id,
        logged_at=session.logged_at,
        exercises=exercises,
    )
