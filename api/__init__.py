"""
API package for the sandbox workouts API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
- schemas/: request and error body models
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_workout_repo,
    get_prefill_use_case,
    get_create_workout_use_case,
    get_current_user,
)

__all__ = [
    # Settings
    "get_settings",
    # Repositories
    "get_workout_repo",
    # Use cases
    "get_prefill_use_case",
    "get_create_workout_use_case",
    # Authentication
    "get_current_user",
]
