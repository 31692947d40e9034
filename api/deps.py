"""
FastAPI Dependency Providers for the workouts API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fakes.

Architecture:
- Settings and the workout repository live on app.state; create_app()
  puts them there
- Use cases are created per-request around the injected repository
- The acting user comes from the X-User-Id header

Usage in routers:
    from api.deps import get_workout_repo, get_current_user
    from application.ports import WorkoutRepository

    @router.get("/api/workouts/prefill/{template_id}")
    def get_prefill(
        template_id: str,
        user_id: str = Depends(get_current_user),
        workout_repo: WorkoutRepository = Depends(get_workout_repo),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_workout_repo] = lambda: FakeWorkoutRepository()
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from application.ports import WorkoutRepository
from application.use_cases import CreateWorkoutUseCase, GetWorkoutPrefillUseCase
from backend.settings import Settings, get_settings as _get_settings


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings(request: Request) -> Settings:
    """
    Get application settings.

    Returns the Settings the app was created with, falling back to the
    cached instance from backend.settings.

    Returns:
        Settings: Application settings instance
    """
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else _get_settings()


# =============================================================================
# Repository Providers
# =============================================================================


def get_workout_repo(request: Request) -> WorkoutRepository:
    """
    Get WorkoutRepository implementation.

    The return type is the Protocol to enable easy mocking.

    Returns:
        WorkoutRepository: Repository attached to the app

    Raises:
        HTTPException: 503 if the app has no repository configured
    """
    repo = getattr(request.app.state, "workout_repo", None)
    if repo is None:
        raise HTTPException(status_code=503, detail="Workout storage not configured")
    return repo


# =============================================================================
# Use Case Providers
# =============================================================================


def get_prefill_use_case(
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
) -> GetWorkoutPrefillUseCase:
    """Get GetWorkoutPrefillUseCase with injected repository."""
    return GetWorkoutPrefillUseCase(workout_repo=workout_repo)


def get_create_workout_use_case(
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
) -> CreateWorkoutUseCase:
    """Get CreateWorkoutUseCase with injected repository."""
    return CreateWorkoutUseCase(workout_repo=workout_repo)


# =============================================================================
# Authentication Providers
# =============================================================================


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Get the acting user ID.

    The sandbox API has no authentication; the caller names the user in
    the X-User-Id header, otherwise settings.sandbox_user_id is used.

    Returns:
        str: User ID
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return settings.sandbox_user_id


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "get_settings",
    "get_workout_repo",
    "get_prefill_use_case",
    "get_create_workout_use_case",
    "get_current_user",
]
