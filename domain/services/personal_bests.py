"""
Personal-best detection for a newly logged workout.

A personal best is the heaviest weight ever logged for an exercise. An
update is reported only when the exercise already had a best and the new
workout beats it; the first time an exercise is logged just records it.
"""

from typing import Dict, List, Mapping

from domain.models.submission import CreateWorkoutCommand, PersonalBestUpdate


def heaviest_weights(command: CreateWorkoutCommand) -> Dict[str, float]:
    """Heaviest weight per exercise_id within one workout."""
    heaviest: Dict[str, float] = {}
    for exercise in command.exercises:
        for logged in exercise.sets:
            current = heaviest.get(exercise.exercise_id)
            if current is None or logged.weight > current:
                heaviest[exercise.exercise_id] = logged.weight
    return heaviest


def detect_personal_bests(
    command: CreateWorkoutCommand,
    previous_bests: Mapping[str, float],
    exercise_names: Mapping[str, str],
) -> List[PersonalBestUpdate]:
    """
    Compare a workout against the stored bests.

    Args:
        command: Workout being created
        previous_bests: Best weight per exercise_id before this workout
        exercise_names: Display names per exercise_id

    Returns:
        One PersonalBestUpdate per exercise whose best improved, in
        workout order
    """
    updates = []
    for exercise_id, weight in heaviest_weights(command).items():
        previous = previous_bests.get(exercise_id)
        if previous is not None and weight > previous:
            updates.append(
                PersonalBestUpdate(
                    exercise_id=exercise_id,
                    exercise_name=exercise_names.get(exercise_id, ""),
                    previous_weight=previous,
                    new_weight=weight,
                )
            )
    return updates
