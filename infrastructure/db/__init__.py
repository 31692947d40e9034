"""
Infrastructure Database Layer.

This package provides implementations of the WorkoutRepository interface
defined in application.ports. The sandbox workouts API uses the in-memory
repository, optionally seeded from a JSON file.

Usage:
    from infrastructure.db import InMemoryWorkoutRepository

    repo = InMemoryWorkoutRepository.from_seed_file("seed.json")
"""

from infrastructure.db.workout_repository import InMemoryWorkoutRepository, SeedFileError

__all__ = [
    # Workout persistence
    "InMemoryWorkoutRepository",
    "SeedFileError",
]
