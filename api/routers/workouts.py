"""
Workouts router for logging sessions.

This router contains endpoints for:
- /api/workouts/prefill/{template_id} - Suggested sets for a template
- /api/workouts - Create a logged workout

Request validation failures never reach these handlers; backend.main
turns them into 400 {"error": "Validation Error", "details": [...]}.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import (
    get_create_workout_use_case,
    get_current_user,
    get_prefill_use_case,
)
from api.schemas.workouts import CreateWorkoutRequest, ErrorResponse
from application.use_cases import CreateWorkoutUseCase, GetWorkoutPrefillUseCase
from domain.models import CreateWorkoutResponse, ValidationErrorResponse, WorkoutPrefill

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"

router = APIRouter(
    prefix="/api/workouts",
    tags=["Workouts"],
)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


# =============================================================================
# Prefill
# =============================================================================


@router.get(
    "/prefill/{template_id}",
    response_model=WorkoutPrefill,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_workout_prefill(
    template_id: str,
    user_id: str = Depends(get_current_user),
    use_case: GetWorkoutPrefillUseCase = Depends(get_prefill_use_case),
):
    """
    Get suggested starting values for logging a template.

    Each set is suggested from the heaviest set of the last workout that
    included the exercise, else from the template's reps and default weight.
    """
    result = use_case.execute(template_id, user_id=user_id)

    if result.not_found:
        return _error(404, "Not Found", "Template not found")
    if not result.success:
        return _error(500, "Internal Server Error", UNEXPECTED_ERROR)

    return result.prefill


# =============================================================================
# Create
# =============================================================================


@router.post(
    "",
    status_code=201,
    response_model=CreateWorkoutResponse,
    responses={400: {"model": ValidationErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_workout(
    request: CreateWorkoutRequest,
    user_id: str = Depends(get_current_user),
    use_case: CreateWorkoutUseCase = Depends(get_create_workout_use_case),
):
    """
    Create a logged workout.

    Returns the stored workout with any personal bests it set.
    """
    result = use_case.execute(user_id=user_id, command=request.to_command())

    if not result.success:
        return _error(500, "Internal Server Error", UNEXPECTED_ERROR)

    return result.workout
