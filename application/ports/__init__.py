"""
Ports (interfaces) for the workout logger.

This package defines abstract interfaces that decouple the session engine
and the workouts API from infrastructure (files, timers, HTTP, storage).
Implementations are provided in the infrastructure layer; in-memory fakes
live in tests/fakes.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the application needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import DraftStorage, Scheduler, WorkoutTransport

    class SessionEngine:
        def __init__(self, *, draft_store, transport: WorkoutTransport, scheduler: Scheduler):
            ...
"""

# Session engine collaborators
from application.ports.draft_storage import DraftStorage
from application.ports.scheduler import ScheduledHandle, Scheduler
from application.ports.workout_transport import WorkoutTransport

# Workouts API persistence
from application.ports.workout_repository import WorkoutRepository

__all__ = [
    "DraftStorage",
    "Scheduler",
    "ScheduledHandle",
    "WorkoutTransport",
    "WorkoutRepository",
]
