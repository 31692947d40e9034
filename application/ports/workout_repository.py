"""
Workout Repository Interface (Port).

Storage behind the workouts API: templates to log against, previously
logged sets used for prefills, and per-exercise personal bests.
Implementations may be in-memory or backed by a database.
"""
from typing import Dict, Iterable, List, Optional, Protocol

from domain.models.submission import CreateWorkoutCommand, CreateWorkoutResponse
from domain.models.template import WorkoutTemplate
from domain.services.prefill_builder import LoggedSet


class WorkoutRepository(Protocol):
    """
    Abstract interface for workout persistence operations.

    All lookups are scoped to a user; a template owned by another user is
    reported as missing.
    """

    def get_template(self, template_id: str, user_id: str) -> Optional[WorkoutTemplate]:
        """
        Get a template by ID.

        Args:
            template_id: Template ID
            user_id: Requesting user

        Returns:
            WorkoutTemplate, or None if not found for this user
        """
        ...

    def get_last_sets(
        self,
        user_id: str,
        exercise_ids: Iterable[str],
    ) -> Dict[str, List[LoggedSet]]:
        """
        Get the sets of the most recent workout containing each exercise.

        Args:
            user_id: User whose history to read
            exercise_ids: Exercises to look up

        Returns:
            Dict of exercise_id to logged sets; exercises never logged are absent
        """
        ...

    def get_personal_bests(
        self,
        user_id: str,
        exercise_ids: Iterable[str],
    ) -> Dict[str, float]:
        """
        Get the heaviest weight ever logged per exercise.

        Returns:
            Dict of exercise_id to weight; exercises never logged are absent
        """
        ...

    def get_exercise_names(self, exercise_ids: Iterable[str]) -> Dict[str, str]:
        """Get display names for exercises; unknown IDs are absent."""
        ...

    def save_workout(
        self,
        user_id: str,
        command: CreateWorkoutCommand,
    ) -> CreateWorkoutResponse:
        """
        Persist a workout and update personal bests.

        Args:
            user_id: Owner of the workout
            command: Validated workout to store

        Returns:
            The created workout with generated IDs. personal_bests_updated
            is left empty; callers compute it before saving.
        """
        ...
