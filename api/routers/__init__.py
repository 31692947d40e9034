"""
Router package for the workouts API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- workouts: Prefill and workout creation for logging sessions
"""

from api.routers.health import router as health_router
from api.routers.workouts import router as workouts_router

__all__ = [
    "health_router",
    "workouts_router",
]
