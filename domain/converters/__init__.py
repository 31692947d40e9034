"""
Domain converters between wire formats and the Session aggregate.

- prefill_to_session: WorkoutPrefill (from the workouts API) -> Session
- session_to_command: Session -> CreateWorkoutCommand (for submission)

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import prefill_to_session, session_to_command

    >>> session = prefill_to_session(prefill)
    >>> command = session_to_command(session)
"""

from domain.converters.prefill_to_session import prefill_to_session
from domain.converters.session_to_command import session_to_command

__all__ = [
    "prefill_to_session",
    "session_to_command",
]
