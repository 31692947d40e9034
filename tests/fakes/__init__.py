"""
Fake Implementations for Testing.

In-memory fakes of the application ports for fast, isolated tests. No
files, timers or network required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Failure injection for storage and transport errors
- reset() for test isolation where state is shared

Usage:
    from tests.fakes import FakeScheduler, FakeWorkoutTransport, InMemoryDraftStorage

    scheduler = FakeScheduler()
    storage = InMemoryDraftStorage()
    transport = FakeWorkoutTransport()
"""
from datetime import datetime, timezone

from tests.fakes.draft_storage import InMemoryDraftStorage
from tests.fakes.scheduler import FakeHandle, FakeScheduler
from tests.fakes.workout_repository import FakeWorkoutRepository
from tests.fakes.workout_transport import FakeWorkoutTransport, make_response

# Wall-clock time used wherever a test needs a fixed "now"
FIXED_NOW = datetime(2026, 1, 5, 18, 30, tzinfo=timezone.utc)

__all__ = [
    "FIXED_NOW",
    "InMemoryDraftStorage",
    "FakeScheduler",
    "FakeHandle",
    "FakeWorkoutTransport",
    "FakeWorkoutRepository",
    "make_response",
]
