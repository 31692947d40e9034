"""
Shared fixtures for the workout logger tests.

Builds engines over the in-memory fakes so every test controls time,
storage and transport explicitly.
"""

import pytest

from application.draft_store import DraftStore
from application.session_engine import EngineConfig, SessionEngine
from backend.settings import get_settings
from domain.models import WorkoutPrefill
from tests.fakes import FIXED_NOW, FakeScheduler, FakeWorkoutTransport, InMemoryDraftStorage


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; start every test from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def prefill() -> WorkoutPrefill:
    """Two exercises, two sets each, all suggestions valid."""
    return WorkoutPrefill.model_validate(
        {
            "template_id": "tpl-1",
            "template_name": "Push Day",
            "exercises": [
                {
                    "exercise_id": "ex-bench",
                    "exercise_name": "Bench Press",
                    "position": 0,
                    "suggested_sets": [
                        {"set_index": 0, "reps": 10, "weight": 60, "source": "last_workout"},
                        {"set_index": 1, "reps": 10, "weight": 60, "source": "last_workout"},
                    ],
                },
                {
                    "exercise_id": "ex-ohp",
                    "exercise_name": "Overhead Press",
                    "position": 1,
                    "suggested_sets": [
                        {"set_index": 0, "reps": 8, "weight": 40, "source": "template_default"},
                        {"set_index": 1, "reps": 8, "weight": 40, "source": "template_default"},
                    ],
                },
            ],
        }
    )


@pytest.fixture
def draft_storage() -> InMemoryDraftStorage:
    return InMemoryDraftStorage()


@pytest.fixture
def draft_store(draft_storage: InMemoryDraftStorage) -> DraftStore:
    return DraftStore(draft_storage, clock=lambda: FIXED_NOW)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def transport() -> FakeWorkoutTransport:
    return FakeWorkoutTransport()


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(draft_save_delay=2.0, clock=lambda: FIXED_NOW)


@pytest.fixture
def engine(draft_store, transport, scheduler, engine_config) -> SessionEngine:
    """Uninitialized engine over the fakes."""
    return SessionEngine(
        draft_store=draft_store,
        transport=transport,
        scheduler=scheduler,
        config=engine_config,
    )
