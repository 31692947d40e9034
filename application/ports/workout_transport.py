"""
Workout Transport Interface (Port).

The submission side of the workouts API as seen by the session engine.
"""
from typing import Protocol

from domain.models import CreateWorkoutCommand, CreateWorkoutResponse


class WorkoutTransport(Protocol):
    """
    Abstract interface for submitting a logged workout.

    Implementations raise TransportValidationError when the server
    rejects the request with field-level violations, and TransportError
    for every other failure (unreachable, timeout, unexpected status,
    malformed response).
    """

    async def create_workout(self, command: CreateWorkoutCommand) -> CreateWorkoutResponse:
        """
        Persist a completed workout.

        Args:
            command: Stripped-down workout to persist

        Returns:
            Created workout with personal-best updates

        Raises:
            TransportValidationError: Server-side validation failed
            TransportError: Any other failure
        """
        ...
