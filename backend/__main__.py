"""
Entry point for running the sandbox workouts API with `python -m backend`.

Listens on the port the CLI's default workout_api_url points at.
"""
import uvicorn

if __name__ == "__main__":
    uvicorn.run("backend.main:app", host="127.0.0.1", port=8001)
