"""
Application-layer exceptions.

These exceptions are used across the application and infrastructure
layers. Transport adapters raise TransportError subclasses so the
session engine can react without knowing about HTTP.
"""

from typing import List, Optional

from domain.services.error_paths import ErrorDetail


class SessionError(Exception):
    """Base exception for logging session errors."""

    pass


class SessionStateError(SessionError):
    """Raised when an operation is not allowed in the session's current state."""

    pass


class SubmissionInProgressError(SessionStateError):
    """Raised when an operation would race an in-flight submission."""

    pass


class DraftStorageError(Exception):
    """Raised by draft storage adapters when a read or write fails."""

    pass


class DraftDecodeError(Exception):
    """Raised when a stored draft can't be decoded into a Session."""

    pass


class TransportError(Exception):
    """Base exception for submission transport failures.

    Everything except a structured validation failure is reported to the
    user the same way, whatever the underlying cause.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TransportValidationError(TransportError):
    """Raised when the workouts API rejects a submission with field violations."""

    def __init__(
        self,
        details: List[ErrorDetail],
        message: str = "Validation Error",
    ):
        super().__init__(message, status_code=400)
        self.details = details
