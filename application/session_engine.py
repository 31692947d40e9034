"""
Workout logging session engine.

Owns the in-memory Session while a workout is being logged and is the
only thing allowed to change it. Coordinates three collaborators:

- DraftStore: local draft so edits survive restarts (debounced writes)
- WorkoutTransport: submission to the workouts API
- Scheduler: timer behind the debounced draft save

State machine:

    OPEN --submit()--> SUBMITTING --success--> SUBMITTED
      ^                    |
      +----failure---------+
    OPEN --cancel()--> ABANDONED
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Literal, Optional

from application.debounce import DebouncedTask
from application.draft_store import DraftStore
from application.exceptions import (
    DraftStorageError,
    SessionStateError,
    SubmissionInProgressError,
    TransportError,
    TransportValidationError,
)
from application.ports.scheduler import Scheduler
from application.ports.workout_transport import WorkoutTransport
from domain.converters import prefill_to_session, session_to_command
from domain.models import CreateWorkoutResponse, Session, WorkoutPrefill
from domain.services import (
    FIX_VALIDATION_ERRORS,
    SESSION_SET_RULES,
    SetRules,
    apply_server_errors,
    coerce_set_value,
    is_form_valid,
    validate_form,
)

logger = logging.getLogger(__name__)

DEFAULT_DRAFT_SAVE_DELAY = 2.0
SUBMIT_FAILED = "Failed to create workout"

SetField = Literal["reps", "weight"]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EngineState(str, Enum):
    """Lifecycle states of a logging session."""

    UNINITIALIZED = "uninitialized"
    OPEN = "open"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class EngineConfig:
    """
    Explicit configuration for a SessionEngine.

    Attributes:
        draft_save_delay: Quiet period before an edit is written to the draft.
        set_rules: Validation rules applied while logging.
        clock: Returns the current time, used for logged_at on new sessions.
    """

    draft_save_delay: float = DEFAULT_DRAFT_SAVE_DELAY
    set_rules: SetRules = SESSION_SET_RULES
    clock: Callable[[], datetime] = _utc_now

    @classmethod
    def from_settings(cls, settings) -> "EngineConfig":
        """Build engine config from application Settings."""
        return cls(draft_save_delay=settings.draft_save_delay_seconds)


class SessionEngine:
    """
    State machine for one workout logging session.

    Usage:
        >>> engine = SessionEngine(
        ...     draft_store=DraftStore(FileDraftStorage(draft_dir)),
        ...     transport=WorkoutAPIClient(base_url),
        ...     scheduler=ThreadTimerScheduler(),
        ... )
        >>> engine.initialize(prefill)
        >>> engine.update_set(0, 0, "reps", 12)
        >>> ok = await engine.submit()
        >>> engine.close()  # flushes the pending draft write
    """

    def __init__(
        self,
        *,
        draft_store: DraftStore,
        transport: WorkoutTransport,
        scheduler: Scheduler,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._draft_store = draft_store
        self._transport = transport
        self._lock = threading.RLock()
        # Serializes draft writes against draft clears.
        self._draft_io_lock = threading.Lock()
        self._draft_save = DebouncedTask(
            scheduler, self._config.draft_save_delay, self._save_draft
        )

        self._session: Optional[Session] = None
        self._state = EngineState.UNINITIALIZED
        self._resumed = False

        self.submit_error: Optional[str] = None
        self.submit_result: Optional[CreateWorkoutResponse] = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def session(self) -> Session:
        """The live session. Mutate it only through the engine."""
        if self._session is None:
            raise SessionStateError("Session has not been initialized")
        return self._session

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == EngineState.OPEN

    @property
    def is_submitting(self) -> bool:
        return self._state == EngineState.SUBMITTING

    @property
    def is_terminal(self) -> bool:
        return self._state in (EngineState.SUBMITTED, EngineState.ABANDONED)

    @property
    def resumed_from_draft(self) -> bool:
        """True if initialize() picked up a stored draft."""
        return self._resumed

    @property
    def is_form_valid(self) -> bool:
        """Whether the submit control should be enabled."""
        with self._lock:
            return self._session is not None and is_form_valid(self._session)

    @property
    def draft_save_pending(self) -> bool:
        return self._draft_save.pending

    # =========================================================================
    # Operations
    # =========================================================================

    def initialize(self, prefill: WorkoutPrefill) -> Session:
        """
        Start the session from a stored draft or from the prefill.

        A draft for the same template is used as-is (values and errors).
        A missing, corrupt or unreadable draft falls back to the prefill;
        this never raises for draft problems.

        Returns:
            The live session.
        """
        with self._lock:
            if self._state != EngineState.UNINITIALIZED:
                raise SessionStateError(f"Session already initialized ({self._state.value})")

            draft = None
            try:
                draft = self._draft_store.load(prefill.template_id)
            except DraftStorageError as e:
                logger.error(f"Could not read draft for template {prefill.template_id}: {e}")

            if draft is not None:
                logger.info(f"Resuming draft for template {prefill.template_id}")
                self._session = draft
                self._resumed = True
            else:
                self._session = prefill_to_session(prefill, now=self._config.clock())
                self._resumed = False

            self._state = EngineState.OPEN
            return self._session

    def update_set(
        self,
        exercise_index: int,
        set_index: int,
        field: SetField,
        value: object,
    ) -> Optional[str]:
        """
        Change reps or weight of one set and re-validate that set.

        The other field of the set is left as it is. The owning
        exercise's completion follows from the sets. A draft save is
        scheduled, not performed.

        Args:
            exercise_index: Index into session.exercises
            set_index: Index into the exercise's sets
            field: "reps" or "weight"
            value: New value, or None to unset the field

        Returns:
            The set's new error message, or None when it is valid.

        Raises:
            SessionStateError: If the session is not open for editing
            ValueError: If field is not "reps" or "weight", or value is not finite
            IndexError: If either index is out of range
            TypeError: If value is not a number or None
        """
        if field not in ("reps", "weight"):
            raise ValueError(f"Unknown set field {field!r}")
        coerced = coerce_set_value(value)

        with self._lock:
            self._require_open("update a set")
            entry = self.session.get_set(exercise_index, set_index)
            setattr(entry, field, coerced)
            entry.error = self._config.set_rules.validate(entry.reps, entry.weight)
            error = entry.error

        self._draft_save.schedule()
        return error

    def validate(self) -> bool:
        """
        Re-validate every set, writing fresh errors onto the session.

        Returns:
            True if the whole form is valid.
        """
        with self._lock:
            return validate_form(self.session, self._config.set_rules)

    async def submit(self) -> bool:
        """
        Validate and submit the session.

        Returns False without calling the transport when a submission is
        already in flight or the form is invalid. On success the draft is
        cleared. On a server validation failure the violations are put on
        the affected sets and the draft is kept. Any other failure leaves
        a generic message in submit_error and keeps the draft.

        Returns:
            True if the workout was created.
        """
        with self._lock:
            if self._state == EngineState.SUBMITTING:
                logger.debug("Submit ignored: submission already in flight")
                return False
            self._require_open("submit")

            if not validate_form(self.session, self._config.set_rules):
                logger.info("Submit blocked: form has validation errors")
                invalid = True
            else:
                invalid = False
                command = session_to_command(self.session)
                self._state = EngineState.SUBMITTING
                self.submit_error = None

        if invalid:
            self._draft_save.schedule()
            return False

        try:
            result = await self._transport.create_workout(command)
        except TransportValidationError as e:
            with self._lock:
                applied = apply_server_errors(self.session, e.details)
                self.submit_error = FIX_VALIDATION_ERRORS
                self._state = EngineState.OPEN
            logger.warning(
                f"Workout rejected by server: {len(e.details)} violation(s), {applied} mapped to sets"
            )
            self._draft_save.schedule()
            return False
        except TransportError as e:
            logger.error(f"Error submitting workout: {e}")
            self._fail_submission(e.message or SUBMIT_FAILED)
            return False
        except Exception as e:
            logger.error(f"Unexpected error submitting workout: {e}")
            self._fail_submission(SUBMIT_FAILED)
            return False

        with self._lock:
            self.submit_result = result
            self._state = EngineState.SUBMITTED
            template_id = self.session.template_id
        self._draft_save.cancel()
        self._clear_draft(template_id)
        logger.info(
            f"Workout {result.id} created from template {template_id} "
            f"({len(result.personal_bests_updated)} personal best(s))"
        )
        return True

    def cancel(self) -> None:
        """
        Abandon the session and clear its draft.

        Raises:
            SubmissionInProgressError: If a submission is in flight; the
                caller must wait for it before abandoning.
        """
        with self._lock:
            if self._state == EngineState.SUBMITTING:
                raise SubmissionInProgressError("Cannot cancel while the workout is being submitted")
            self._require_open("cancel")
            self._state = EngineState.ABANDONED
            template_id = self.session.template_id
        self._draft_save.cancel()
        self._clear_draft(template_id)
        logger.info(f"Session for template {template_id} abandoned")

    def flush(self) -> bool:
        """
        Write a pending draft save now.

        Returns:
            True if a pending save was executed.
        """
        return self._draft_save.flush()

    def close(self) -> None:
        """Teardown: flush the pending draft save and stop the timer."""
        self._draft_save.close()

    def dismiss_error(self) -> None:
        """Clear the form-level error banner."""
        with self._lock:
            self.submit_error = None

    def __enter__(self) -> "SessionEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_open(self, action: str) -> None:
        if self._state == EngineState.UNINITIALIZED:
            raise SessionStateError("Session has not been initialized")
        if self._state != EngineState.OPEN:
            raise SessionStateError(f"Cannot {action}: session is {self._state.value}")

    def _fail_submission(self, message: str) -> None:
        with self._lock:
            self.submit_error = message
            self._state = EngineState.OPEN

    def _save_draft(self) -> None:
        with self._draft_io_lock:
            with self._lock:
                if self._session is None or self._state not in (
                    EngineState.OPEN,
                    EngineState.SUBMITTING,
                ):
                    return
                template_id = self._session.template_id
                snapshot = self._session.model_copy(deep=True)
            try:
                self._draft_store.save(template_id, snapshot)
            except DraftStorageError as e:
                logger.error(f"Failed to save draft for template {template_id}: {e}")

    def _clear_draft(self, template_id: str) -> None:
        with self._draft_io_lock:
            try:
                self._draft_store.clear(template_id)
            except DraftStorageError as e:
                logger.error(f"Failed to clear draft for template {template_id}: {e}")
