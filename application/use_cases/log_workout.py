"""
Workout logging use cases served by the workouts API.

- GetWorkoutPrefillUseCase: suggested sets for a template
- CreateWorkoutUseCase: persist a validated workout and report new
  personal bests
"""

import logging
from dataclasses import dataclass
from typing import Optional

from application.ports.workout_repository import WorkoutRepository
from domain.models.prefill import WorkoutPrefill
from domain.models.submission import CreateWorkoutCommand, CreateWorkoutResponse
from domain.services.personal_bests import detect_personal_bests
from domain.services.prefill_builder import build_prefill

logger = logging.getLogger(__name__)


@dataclass
class GetPrefillResult:
    """Result of the GetWorkoutPrefill use case execution."""

    success: bool
    prefill: Optional[WorkoutPrefill] = None
    not_found: bool = False
    error: Optional[str] = None


@dataclass
class CreateWorkoutResult:
    """Result of the CreateWorkout use case execution."""

    success: bool
    workout: Optional[CreateWorkoutResponse] = None
    error: Optional[str] = None


class GetWorkoutPrefillUseCase:
    """
    Use case for building a template's prefill.

    Usage:
        >>> use_case = GetWorkoutPrefillUseCase(workout_repo=repo)
        >>> result = use_case.execute("tpl-1", user_id="user-123")
        >>> if result.success:
        ...     print(result.prefill.template_name)
    """

    def __init__(self, workout_repo: WorkoutRepository) -> None:
        self._workout_repo = workout_repo

    def execute(self, template_id: str, user_id: str) -> GetPrefillResult:
        try:
            template = self._workout_repo.get_template(template_id, user_id)
            if template is None:
                logger.info(f"Template not found: {template_id} (user {user_id})")
                return GetPrefillResult(
                    success=False, not_found=True, error="Template not found"
                )

            exercise_ids = [e.exercise_id for e in template.exercises]
            last_sets = self._workout_repo.get_last_sets(user_id, exercise_ids)
            prefill = build_prefill(template, last_sets)
            logger.info(
                f"Prefill built for template {template_id}: "
                f"{len(last_sets)}/{len(exercise_ids)} exercises from history"
            )
            return GetPrefillResult(success=True, prefill=prefill)

        except Exception as e:
            logger.exception(f"GetWorkoutPrefill use case failed: {e}")
            return GetPrefillResult(success=False, error=str(e))


class CreateWorkoutUseCase:
    """
    Use case for persisting a logged workout.

    The command is expected to be validated already (the API schema does
    this). Personal bests are compared against the stored bests before
    the workout is saved.

    Usage:
        >>> use_case = CreateWorkoutUseCase(workout_repo=repo)
        >>> result = use_case.execute(user_id="user-123", command=command)
        >>> for pb in result.workout.personal_bests_updated:
        ...     print(pb.exercise_name, pb.new_weight)
    """

    def __init__(self, workout_repo: WorkoutRepository) -> None:
        self._workout_repo = workout_repo

    def execute(self, user_id: str, command: CreateWorkoutCommand) -> CreateWorkoutResult:
        try:
            exercise_ids = [e.exercise_id for e in command.exercises]
            previous_bests = self._workout_repo.get_personal_bests(user_id, exercise_ids)
            names = self._workout_repo.get_exercise_names(exercise_ids)
            updates = detect_personal_bests(command, previous_bests, names)

            saved = self._workout_repo.save_workout(user_id, command)
            workout = saved.model_copy(update={"personal_bests_updated": updates})

            logger.info(
                f"Workout created: {workout.id} "
                f"({len(command.exercises)} exercises, {len(updates)} personal bests)"
            )
            return CreateWorkoutResult(success=True, workout=workout)

        except Exception as e:
            logger.exception(f"CreateWorkout use case failed: {e}")
            return CreateWorkoutResult(success=False, error=str(e))
