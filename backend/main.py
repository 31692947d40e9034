"""
Application factory for the sandbox workouts API.

The sandbox implements the two endpoints a logging session talks to, so
the CLI and integration tests can run without the production backend.
The factory pattern allows for:
- Easy testing with custom settings
- Injecting a pre-seeded repository
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings and storage
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings, workout_repo=FakeWorkoutRepository())
"""

import logging
from typing import Any, List, Optional, Sequence

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from application.ports import WorkoutRepository
from backend.settings import Settings, get_settings
from domain.models import ValidationErrorDetail, ValidationErrorResponse
from infrastructure.db.workout_repository import InMemoryWorkoutRepository

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds in front of the field path
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def create_app(
    settings: Optional[Settings] = None,
    workout_repo: Optional[WorkoutRepository] = None,
) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        workout_repo: Optional repository. If not provided, an in-memory
                  repository is created, seeded from settings.sandbox_seed_file.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    app = FastAPI(
        title="Workout Logger Sandbox API",
        description="Prefill and workout creation endpoints for local logging sessions",
        version="1.0.0",
    )

    app.state.settings = settings
    app.state.workout_repo = workout_repo if workout_repo is not None else _build_repo(settings)

    _register_exception_handlers(app)
    _include_routers(app)

    logger.info(f"Sandbox workouts API created (environment: {settings.environment})")
    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )
        logger.info("Sentry initialized for the workouts API")


def _build_repo(settings: Settings) -> InMemoryWorkoutRepository:
    if settings.sandbox_seed_file is None:
        return InMemoryWorkoutRepository()
    logger.info(f"Seeding sandbox storage from {settings.sandbox_seed_file}")
    return InMemoryWorkoutRepository.from_seed_file(settings.sandbox_seed_file)


def error_field_path(loc: Sequence[Any]) -> str:
    """
    Turn a validation error location into a dotted field path.

    Examples:
        >>> error_field_path(("body", "exercises", 0, "sets", 1, "reps"))
        'exercises.0.sets.1.reps'
    """
    parts = list(loc)
    if parts and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts)


def validation_details(errors: Sequence[dict]) -> List[ValidationErrorDetail]:
    return [
        ValidationErrorDetail(field=error_field_path(e.get("loc", ())), message=e.get("msg", ""))
        for e in errors
    ]


def _register_exception_handlers(app: FastAPI) -> None:
    """Map request validation errors to 400 and anything unhandled to 500."""

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        body = ValidationErrorResponse(details=validation_details(exc.errors()))
        logger.warning(
            f"Validation failed for {request.method} {request.url.path}: "
            f"{[d.field for d in body.details]}"
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error for {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred",
            },
        )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import health_router, workouts_router

    # Health router (no prefix - /health at root)
    app.include_router(health_router)
    app.include_router(workouts_router)


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
