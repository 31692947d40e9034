"""
Unit tests for application/session_engine.py

Tests for:
- Initialization from prefill or draft
- Set updates, per-set validation and derived completion
- Debounced draft saves, flush and teardown
- Submission: client-side invalid, server validation failure, transport
  failure, success, re-entrancy
- Cancel, including refusal during submission
- Draft writes on an asyncio host
"""

import asyncio
import threading

import pytest

from application.draft_store import DraftStore, draft_key
from application.exceptions import (
    SessionStateError,
    SubmissionInProgressError,
    TransportError,
    TransportValidationError,
)
from application.session_engine import (
    SUBMIT_FAILED,
    EngineConfig,
    EngineState,
    SessionEngine,
)
from domain.converters import prefill_to_session
from domain.models import PersonalBestUpdate, ValidationErrorDetail, WorkoutPrefill
from domain.services import ALL_FIELDS_REQUIRED, FIX_VALIDATION_ERRORS
from infrastructure.scheduling import AsyncioScheduler
from tests.fakes import FIXED_NOW

DRAFT_KEY = draft_key("tpl-1")


@pytest.fixture
def single_set_prefill() -> WorkoutPrefill:
    return WorkoutPrefill.model_validate(
        {
            "template_id": "tpl-1",
            "template_name": "Quick",
            "exercises": [
                {
                    "exercise_id": "ex-squat",
                    "exercise_name": "Squat",
                    "position": 0,
                    "suggested_sets": [
                        {"set_index": 0, "reps": 10, "weight": 0, "source": "template_default"}
                    ],
                }
            ],
        }
    )


@pytest.fixture
def open_engine(engine, prefill) -> SessionEngine:
    engine.initialize(prefill)
    return engine


# =============================================================================
# Initialization
# =============================================================================


@pytest.mark.unit
class TestInitialize:
    def test_fresh_session_from_prefill(self, engine, prefill):
        session = engine.initialize(prefill)

        assert engine.state == EngineState.OPEN
        assert engine.resumed_from_draft is False
        assert session == prefill_to_session(prefill, now=FIXED_NOW)

    def test_resumes_draft(self, engine, prefill, draft_store):
        draft = prefill_to_session(prefill, now=FIXED_NOW)
        draft.exercises[0].sets[0].reps = 7
        draft.exercises[0].sets[1].error = "Server said no."
        draft_store.save("tpl-1", draft)

        session = engine.initialize(prefill)

        assert engine.resumed_from_draft is True
        assert session.exercises[0].sets[0].reps == 7
        assert session.exercises[0].sets[1].error == "Server said no."

    def test_corrupt_draft_falls_back_to_prefill(self, engine, prefill, draft_storage):
        draft_storage.items[DRAFT_KEY] = '{"version": 1, "session": 12}'

        session = engine.initialize(prefill)

        assert session == prefill_to_session(prefill, now=FIXED_NOW)
        assert engine.resumed_from_draft is False
        assert DRAFT_KEY not in draft_storage.items

    def test_unreadable_storage_falls_back_to_prefill(self, engine, prefill, draft_storage):
        draft_storage.fail_reads = True

        session = engine.initialize(prefill)

        assert session == prefill_to_session(prefill, now=FIXED_NOW)

    def test_other_templates_draft_is_not_used(self, engine, prefill, draft_store):
        other = prefill_to_session(prefill, now=FIXED_NOW).model_copy(
            update={"template_id": "tpl-2"}
        )
        draft_store.save("tpl-2", other)

        engine.initialize(prefill)

        assert engine.resumed_from_draft is False

    def test_initialize_twice_is_refused(self, open_engine, prefill):
        with pytest.raises(SessionStateError):
            open_engine.initialize(prefill)

    def test_session_before_initialize(self, engine):
        with pytest.raises(SessionStateError):
            engine.session


# =============================================================================
# Editing
# =============================================================================


@pytest.mark.unit
class TestUpdateSet:
    def test_valid_update_completes_exercise(self, engine, single_set_prefill):
        engine.initialize(single_set_prefill)

        engine.update_set(0, 0, "reps", 12)
        error = engine.update_set(0, 0, "weight", 52.5)

        entry = engine.session.exercises[0].sets[0]
        assert error is None
        assert (entry.reps, entry.weight, entry.error) == (12, 52.5, None)
        assert engine.session.exercises[0].completed is True

    def test_too_precise_weight(self, engine, single_set_prefill):
        engine.initialize(single_set_prefill)

        engine.update_set(0, 0, "reps", 12)
        error = engine.update_set(0, 0, "weight", 52.55)

        assert error == "Weight can have at most 1 decimal place."
        assert engine.session.exercises[0].sets[0].error == error
        assert engine.session.exercises[0].completed is False

    def test_other_field_is_preserved(self, open_engine):
        open_engine.update_set(1, 1, "reps", 5)
        entry = open_engine.session.exercises[1].sets[1]
        assert (entry.reps, entry.weight) == (5, 40)

    def test_unset_field(self, open_engine):
        error = open_engine.update_set(0, 0, "weight", None)
        assert error == ALL_FIELDS_REQUIRED
        assert open_engine.is_form_valid is False

    def test_correcting_a_set_clears_its_error(self, open_engine):
        open_engine.update_set(0, 0, "reps", 0)
        assert open_engine.update_set(0, 0, "reps", 8) is None

    def test_shape_is_fixed(self, open_engine):
        with pytest.raises(IndexError):
            open_engine.update_set(0, 5, "reps", 10)
        with pytest.raises(IndexError):
            open_engine.update_set(9, 0, "reps", 10)

    def test_unknown_field(self, open_engine):
        with pytest.raises(ValueError):
            open_engine.update_set(0, 0, "tempo", 3)

    def test_non_numeric_value(self, open_engine):
        with pytest.raises(TypeError):
            open_engine.update_set(0, 0, "reps", "ten")

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_value_leaves_set_untouched(self, open_engine, value):
        before = open_engine.session.exercises[0].sets[0].model_copy()

        with pytest.raises(ValueError):
            open_engine.update_set(0, 0, "weight", value)

        assert open_engine.session.exercises[0].sets[0] == before

    def test_edit_before_initialize(self, engine):
        with pytest.raises(SessionStateError):
            engine.update_set(0, 0, "reps", 10)


# =============================================================================
# Draft saves
# =============================================================================


@pytest.mark.unit
class TestDraftSaves:
    def test_edits_are_debounced_into_one_write(self, open_engine, scheduler, draft_storage):
        for reps in range(1, 11):
            open_engine.update_set(0, 0, "reps", reps)
            scheduler.advance(0.5)

        assert draft_storage.writes == []
        assert open_engine.draft_save_pending

        scheduler.advance(2.0)

        assert draft_storage.writes == [DRAFT_KEY]
        assert not open_engine.draft_save_pending

    def test_draft_holds_latest_state(self, open_engine, scheduler, draft_store):
        open_engine.update_set(0, 0, "reps", 3)
        open_engine.update_set(0, 1, "weight", 52.55)
        scheduler.advance(2.0)

        saved = draft_store.load("tpl-1")
        assert saved.exercises[0].sets[0].reps == 3
        assert saved.exercises[0].sets[1].error == "Weight can have at most 1 decimal place."

    def test_flush_writes_pending_save(self, open_engine, draft_storage):
        open_engine.update_set(0, 0, "reps", 3)

        assert open_engine.flush() is True
        assert draft_storage.writes == [DRAFT_KEY]
        assert open_engine.flush() is False

    def test_context_manager_flushes_on_exit(self, engine, prefill, draft_storage):
        with engine:
            engine.initialize(prefill)
            engine.update_set(0, 0, "reps", 3)

        assert DRAFT_KEY in draft_storage.items

    def test_write_failure_is_logged_not_raised(self, open_engine, scheduler, draft_storage, caplog):
        draft_storage.fail_writes = True
        open_engine.update_set(0, 0, "reps", 3)

        scheduler.advance(2.0)

        assert "Failed to save draft" in caplog.text
        assert open_engine.session.exercises[0].sets[0].reps == 3

    def test_custom_delay(self, draft_store, transport, scheduler, prefill, draft_storage):
        engine = SessionEngine(
            draft_store=draft_store,
            transport=transport,
            scheduler=scheduler,
            config=EngineConfig(draft_save_delay=0.5, clock=lambda: FIXED_NOW),
        )
        engine.initialize(prefill)
        engine.update_set(0, 0, "reps", 3)

        scheduler.advance(0.5)

        assert draft_storage.writes == [DRAFT_KEY]


# =============================================================================
# Submission
# =============================================================================


@pytest.mark.unit
class TestSubmit:
    @pytest.mark.asyncio
    async def test_invalid_form_blocks_transport(self, open_engine, transport, scheduler, draft_storage):
        open_engine.update_set(0, 0, "reps", 0)

        assert await open_engine.submit() is False

        assert transport.call_count == 0
        assert open_engine.session.exercises[0].sets[0].error == "Reps must be between 1 and 99."
        assert open_engine.session.exercises[1].completed is True
        assert open_engine.submit_error is None
        assert open_engine.state == EngineState.OPEN

        scheduler.advance(2.0)
        assert DRAFT_KEY in draft_storage.items

    @pytest.mark.asyncio
    async def test_server_validation_failure_maps_onto_sets(
        self, open_engine, transport, scheduler, draft_storage
    ):
        transport.fail_with(
            TransportValidationError(
                [ValidationErrorDetail(field="exercises.1.sets.0.reps", message="Too many reps.")]
            )
        )

        assert await open_engine.submit() is False

        assert open_engine.session.exercises[1].sets[0].error == "Too many reps."
        assert open_engine.session.exercises[1].completed is False
        assert open_engine.session.exercises[0].completed is True
        assert all(s.error is None for s in open_engine.session.exercises[0].sets)
        assert open_engine.submit_error == FIX_VALIDATION_ERRORS

    @pytest.mark.asyncio
    async def test_malformed_server_violations_are_skipped(
        self, open_engine, transport, scheduler, draft_storage
    ):
        transport.fail_with(
            TransportValidationError(
                [
                    ValidationErrorDetail(field="exercises.1.sets.0.reps", message="Too many reps."),
                    {"field": None, "message": "No path."},
                    {"field": "exercises.0.sets.1.weight"},
                    {"field": 3, "message": "Numeric path."},
                ]
            )
        )

        assert await open_engine.submit() is False

        assert open_engine.session.exercises[1].sets[0].error == "Too many reps."
        assert open_engine.session.exercises[0].completed is True
        assert open_engine.submit_error == FIX_VALIDATION_ERRORS
        assert open_engine.state == EngineState.OPEN

        scheduler.advance(2.0)
        saved = DraftStore(draft_storage).load("tpl-1")
        assert saved.exercises[1].sets[0].error == "Too many reps."

    @pytest.mark.asyncio
    async def test_successful_submit_clears_draft(self, open_engine, transport, draft_storage):
        open_engine.update_set(0, 0, "reps", 11)
        open_engine.flush()
        assert DRAFT_KEY in draft_storage.items

        transport.personal_bests = [
            PersonalBestUpdate(exercise_id="ex-bench", previous_weight=55, new_weight=60)
        ]
        assert await open_engine.submit() is True

        assert DRAFT_KEY not in draft_storage.items
        assert open_engine.state == EngineState.SUBMITTED
        assert open_engine.is_terminal
        assert open_engine.submit_result.personal_bests_updated[0].new_weight == 60

        command = transport.commands[0]
        assert command.template_id == "tpl-1"
        assert command.logged_at == FIXED_NOW
        assert command.exercises[0].sets[0].reps == 11

    @pytest.mark.asyncio
    async def test_success_cancels_pending_save(self, open_engine, scheduler, draft_storage):
        open_engine.update_set(0, 0, "reps", 11)

        assert await open_engine.submit() is True
        scheduler.run_pending()

        assert DRAFT_KEY not in draft_storage.items

    @pytest.mark.asyncio
    async def test_transport_failure_uses_its_message(self, open_engine, transport, draft_storage):
        open_engine.update_set(0, 0, "reps", 11)
        open_engine.flush()
        transport.fail_with(TransportError("Workouts API request timed out"))

        assert await open_engine.submit() is False

        assert open_engine.submit_error == "Workouts API request timed out"
        assert open_engine.state == EngineState.OPEN
        assert DRAFT_KEY in draft_storage.items

    @pytest.mark.asyncio
    async def test_unexpected_failure_uses_generic_message(self, open_engine, transport):
        transport.fail_with(RuntimeError("boom"))

        assert await open_engine.submit() is False
        assert open_engine.submit_error == SUBMIT_FAILED

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, open_engine, transport):
        transport.fail_with(TransportError("Failed to create workout"))
        assert await open_engine.submit() is False

        transport.fail_with(None)
        assert await open_engine.submit() is True
        assert open_engine.submit_error is None
        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_in_flight_submission_guards(self, open_engine, transport):
        transport.gate = asyncio.Event()

        first = asyncio.create_task(open_engine.submit())
        await asyncio.sleep(0)
        assert open_engine.is_submitting

        assert await open_engine.submit() is False
        with pytest.raises(SubmissionInProgressError):
            open_engine.cancel()
        with pytest.raises(SessionStateError):
            open_engine.update_set(0, 0, "reps", 3)

        transport.gate.set()
        assert await first is True
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_submit_after_success_is_refused(self, open_engine):
        assert await open_engine.submit() is True
        with pytest.raises(SessionStateError):
            await open_engine.submit()


# =============================================================================
# Cancel
# =============================================================================


@pytest.mark.unit
class TestCancel:
    def test_cancel_clears_draft(self, open_engine, scheduler, draft_storage):
        open_engine.update_set(0, 0, "reps", 3)
        open_engine.flush()

        open_engine.cancel()

        assert open_engine.state == EngineState.ABANDONED
        assert DRAFT_KEY not in draft_storage.items

    def test_cancel_drops_pending_save(self, open_engine, scheduler, draft_storage):
        open_engine.update_set(0, 0, "reps", 3)
        open_engine.cancel()

        scheduler.run_pending()
        open_engine.close()

        assert DRAFT_KEY not in draft_storage.items

    def test_edits_after_cancel_are_refused(self, open_engine):
        open_engine.cancel()
        with pytest.raises(SessionStateError):
            open_engine.update_set(0, 0, "reps", 3)

    def test_dismiss_error(self, open_engine):
        open_engine.submit_error = "Failed to create workout"
        open_engine.dismiss_error()
        assert open_engine.submit_error is None


# =============================================================================
# Asyncio host
# =============================================================================


@pytest.mark.unit
class TestAsyncioHost:
    @pytest.mark.asyncio
    async def test_draft_write_runs_off_the_loop(self, draft_store, draft_storage, transport, prefill):
        loop_thread = threading.get_ident()
        write_threads = []
        written = threading.Event()
        set_item = draft_storage.set_item

        def recording_set_item(key, value):
            write_threads.append(threading.get_ident())
            set_item(key, value)
            written.set()

        draft_storage.set_item = recording_set_item
        engine = SessionEngine(
            draft_store=draft_store,
            transport=transport,
            scheduler=AsyncioScheduler(),
            config=EngineConfig(draft_save_delay=0.01, clock=lambda: FIXED_NOW),
        )
        engine.initialize(prefill)
        engine.update_set(0, 0, "reps", 6)

        assert await asyncio.to_thread(written.wait, 2.0)
        assert write_threads[0] != loop_thread
        assert draft_store.load("tpl-1").exercises[0].sets[0].reps == 6
