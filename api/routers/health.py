"""
Liveness endpoint for the sandbox workouts API.
"""

from fastapi import APIRouter

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """Report that the process is up; storage is not checked."""
    return {"status": "ok"}
