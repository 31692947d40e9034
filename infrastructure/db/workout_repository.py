"""
In-memory implementation of WorkoutRepository.

Backs the sandbox workouts API. Templates and past workouts can be seeded
from a JSON file of the form:

    {
        "templates": [{"id": "tpl-1", "user_id": "u1", "name": "Push Day",
                       "exercises": [...]}],
        "workouts": [{"user_id": "u1", "template_id": "tpl-1",
                      "logged_at": "2026-01-05T18:30:00Z", "exercises": [...]}]
    }

Templates with no user_id are visible to every user.
"""

import json
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from domain.models.submission import (
    CreateWorkoutCommand,
    CreateWorkoutResponse,
    WorkoutExerciseDetail,
    WorkoutSetDetail,
)
from domain.models.template import WorkoutTemplate
from domain.services.personal_bests import heaviest_weights
from domain.services.prefill_builder import LoggedSet

logger = logging.getLogger(__name__)


class SeedFileError(Exception):
    """Raised when a seed file can't be read or doesn't validate."""

    pass


@dataclass
class _StoredWorkout:
    user_id: str
    response: CreateWorkoutResponse


class InMemoryWorkoutRepository:
    """
    Thread-safe in-memory workout storage.

    Usage:
        repo = InMemoryWorkoutRepository()
        repo.add_template(template)
        saved = repo.save_workout("user-1", command)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._templates: Dict[str, WorkoutTemplate] = {}
        self._workouts: List[_StoredWorkout] = []
        self._bests: Dict[tuple, float] = {}
        self._exercise_names: Dict[str, str] = {}

    # =========================================================================
    # Seeding
    # =========================================================================

    def add_template(self, template: WorkoutTemplate) -> None:
        """Add or replace a template."""
        with self._lock:
            self._templates[template.id] = template
            for exercise in template.exercises:
                if exercise.exercise_name:
                    self._exercise_names[exercise.exercise_id] = exercise.exercise_name

    def seed(self, data: Dict[str, Any]) -> None:
        """
        Seed templates and past workouts from a decoded seed document.

        Raises:
            SeedFileError: If any entry fails validation
        """
        try:
            templates = [WorkoutTemplate.model_validate(t) for t in data.get("templates", [])]
            workouts = [
                (w["user_id"], CreateWorkoutCommand.model_validate(w))
                for w in data.get("workouts", [])
            ]
        except (KeyError, TypeError, ValidationError) as e:
            raise SeedFileError(f"Invalid seed data: {e}") from e

        for template in templates:
            self.add_template(template)
        for user_id, command in workouts:
            self.save_workout(user_id, command)
        logger.info(f"Seeded {len(templates)} templates and {len(workouts)} workouts")

    @classmethod
    def from_seed_file(cls, path: Path) -> "InMemoryWorkoutRepository":
        """Create a repository seeded from a JSON file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SeedFileError(f"Cannot read seed file {path}: {e}") from e
        if not isinstance(data, dict):
            raise SeedFileError(f"Seed file {path} must contain a JSON object")

        repo = cls()
        repo.seed(data)
        return repo

    # =========================================================================
    # WorkoutRepository Protocol Methods
    # =========================================================================

    def get_template(self, template_id: str, user_id: str) -> Optional[WorkoutTemplate]:
        with self._lock:
            template = self._templates.get(template_id)
        if template is None:
            return None
        if template.user_id is not None and template.user_id != user_id:
            return None
        return template

    def get_last_sets(
        self,
        user_id: str,
        exercise_ids: Iterable[str],
    ) -> Dict[str, List[LoggedSet]]:
        wanted = set(exercise_ids)
        with self._lock:
            workouts = [w.response for w in self._workouts if w.user_id == user_id]

        last: Dict[str, List[LoggedSet]] = {}
        # Newest first; among equal timestamps the later insert wins
        for workout in sorted(reversed(workouts), key=lambda w: w.logged_at, reverse=True):
            for exercise in workout.exercises:
                if exercise.exercise_id in wanted and exercise.exercise_id not in last:
                    last[exercise.exercise_id] = [
                        LoggedSet(set_index=s.set_index, reps=s.reps, weight=s.weight)
                        for s in exercise.sets
                    ]
        return last

    def get_personal_bests(
        self,
        user_id: str,
        exercise_ids: Iterable[str],
    ) -> Dict[str, float]:
        with self._lock:
            return {
                exercise_id: self._bests[(user_id, exercise_id)]
                for exercise_id in exercise_ids
                if (user_id, exercise_id) in self._bests
            }

    def get_exercise_names(self, exercise_ids: Iterable[str]) -> Dict[str, str]:
        with self._lock:
            return {
                exercise_id: self._exercise_names[exercise_id]
                for exercise_id in exercise_ids
                if exercise_id in self._exercise_names
            }

    def save_workout(
        self,
        user_id: str,
        command: CreateWorkoutCommand,
    ) -> CreateWorkoutResponse:
        workout_id = str(uuid.uuid4())
        logged_at = command.logged_at or datetime.now(timezone.utc)
        if logged_at.tzinfo is None:
            logged_at = logged_at.replace(tzinfo=timezone.utc)

        with self._lock:
            template = self._templates.get(command.template_id) if command.template_id else None
            exercises = []
            for exercise in command.exercises:
                exercise_row_id = str(uuid.uuid4())
                exercises.append(
                    WorkoutExerciseDetail(
                        id=exercise_row_id,
                        workout_id=workout_id,
                        exercise_id=exercise.exercise_id,
                        exercise_name=self._exercise_names.get(exercise.exercise_id, ""),
                        position=exercise.position,
                        sets=[
                            WorkoutSetDetail(
                                id=str(uuid.uuid4()),
                                workout_exercise_id=exercise_row_id,
                                set_index=s.set_index,
                                reps=s.reps,
                                weight=s.weight,
                            )
                            for s in exercise.sets
                        ],
                    )
                )

            response = CreateWorkoutResponse(
                id=workout_id,
                user_id=user_id,
                template_id=command.template_id,
                template_name=template.name if template else None,
                logged_at=logged_at,
                exercises=exercises,
            )
            self._workouts.append(_StoredWorkout(user_id=user_id, response=response))

            for exercise_id, weight in heaviest_weights(command).items():
                key = (user_id, exercise_id)
                if weight > self._bests.get(key, float("-inf")):
                    self._bests[key] = weight

        logger.info(f"Workout {workout_id} stored for user {user_id}")
        return response.model_copy(deep=True)
