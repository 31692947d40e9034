"""
Unit tests for infrastructure/workout_api_client.py

Requests are answered by httpx.MockTransport so nothing leaves the process.
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from application.exceptions import TransportError, TransportValidationError
from domain.models import CreateWorkoutCommand
from infrastructure.workout_api_client import (
    TemplateNotFound,
    WorkoutAPIClient,
    WorkoutAPIError,
    WorkoutAPIUnavailable,
)

BASE_URL = "http://workouts.test"

PREFILL_BODY = {
    "template_id": "tpl-1",
    "template_name": "Push Day",
    "exercises": [
        {
            "exercise_id": "ex-bench",
            "exercise_name": "Bench Press",
            "position": 0,
            "suggested_sets": [
                {"set_index": 0, "reps": 10, "weight": 60, "source": "last_workout"}
            ],
        }
    ],
}


@pytest.fixture
def command() -> CreateWorkoutCommand:
    return CreateWorkoutCommand.model_validate(
        {
            "template_id": "tpl-1",
            "logged_at": "2026-01-05T18:30:00Z",
            "exercises": [
                {
                    "exercise_id": "ex-bench",
                    "position": 0,
                    "sets": [{"set_index": 0, "reps": 10, "weight": 60}],
                }
            ],
        }
    )


def client_for(handler) -> WorkoutAPIClient:
    return WorkoutAPIClient(BASE_URL, transport=httpx.MockTransport(handler))


# =============================================================================
# get_prefill
# =============================================================================


@pytest.mark.unit
class TestGetPrefill:
    @pytest.mark.asyncio
    async def test_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=PREFILL_BODY)

        prefill = await client_for(handler).get_prefill("tpl-1")

        assert prefill.template_name == "Push Day"
        assert prefill.exercises[0].suggested_sets[0].source == "last_workout"
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/api/workouts/prefill/tpl-1"

    @pytest.mark.asyncio
    async def test_template_id_is_escaped(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=PREFILL_BODY)

        await client_for(handler).get_prefill("a/b")

        assert seen[0].url.raw_path == b"/api/workouts/prefill/a%2Fb"

    @pytest.mark.asyncio
    async def test_not_found(self):
        client = client_for(
            lambda request: httpx.Response(404, json={"error": "Not Found", "message": "Template not found"})
        )

        with pytest.raises(TemplateNotFound) as exc_info:
            await client.get_prefill("missing")

        assert exc_info.value.template_id == "missing"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_server_error_uses_body_message(self):
        client = client_for(
            lambda request: httpx.Response(500, json={"error": "Internal Server Error", "message": "db down"})
        )

        with pytest.raises(WorkoutAPIError) as exc_info:
            await client.get_prefill("tpl-1")

        assert exc_info.value.message == "db down"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        client = client_for(lambda request: httpx.Response(200, json={"template_id": 1}))

        with pytest.raises(WorkoutAPIError, match="Malformed prefill response"):
            await client.get_prefill("tpl-1")

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=PREFILL_BODY)

        client = WorkoutAPIClient(
            BASE_URL + "/", auth_token="secret", transport=httpx.MockTransport(handler)
        )
        await client.get_prefill("tpl-1")

        assert seen[0].headers["Authorization"] == "Bearer secret"
        assert str(seen[0].url) == f"{BASE_URL}/api/workouts/prefill/tpl-1"


# =============================================================================
# create_workout
# =============================================================================


@pytest.mark.unit
class TestCreateWorkout:
    @pytest.mark.asyncio
    async def test_created(self, command):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(
                201,
                json={
                    "id": "w-1",
                    "template_id": "tpl-1",
                    "logged_at": "2026-01-05T18:30:00Z",
                    "personal_bests_updated": [
                        {"exercise_id": "ex-bench", "exercise_name": "Bench Press",
                         "previous_weight": 55, "new_weight": 60}
                    ],
                },
            )

        result = await client_for(handler).create_workout(command)

        assert result.id == "w-1"
        assert result.logged_at == datetime(2026, 1, 5, 18, 30, tzinfo=timezone.utc)
        assert result.personal_bests_updated[0].previous_weight == 55
        assert seen[0]["exercises"][0]["sets"][0] == {"set_index": 0, "reps": 10, "weight": 60.0}

    @pytest.mark.asyncio
    async def test_validation_failure_carries_details(self, command):
        body = {
            "error": "Validation Error",
            "details": [{"field": "exercises.0.sets.0.reps", "message": "Reps must be between 1 and 99."}],
        }
        client = client_for(lambda request: httpx.Response(400, json=body))

        with pytest.raises(TransportValidationError) as exc_info:
            await client.create_workout(command)

        assert exc_info.value.details[0].field == "exercises.0.sets.0.reps"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_violations_do_not_drop_the_rest(self, command):
        body = {
            "error": "Validation Error",
            "details": [
                {"field": "exercises.0.sets.0.reps", "message": "Too many reps."},
                {"field": None, "message": "No path."},
                {"field": 7, "message": "Numeric path."},
                {"field": "exercises.0.sets.0.weight"},
                "not an object",
            ],
        }
        client = client_for(lambda request: httpx.Response(400, json=body))

        with pytest.raises(TransportValidationError) as exc_info:
            await client.create_workout(command)

        details = exc_info.value.details
        assert len(details) == 4
        assert details[0].field == "exercises.0.sets.0.reps"
        assert details[0].message == "Too many reps."
        assert details[1] == {"field": None, "message": "No path."}
        assert exc_info.value.message == "Validation Error"

    @pytest.mark.asyncio
    async def test_400_without_details_is_a_plain_error(self, command):
        client = client_for(lambda request: httpx.Response(400, json={"message": "Bad JSON"}))

        with pytest.raises(WorkoutAPIError) as exc_info:
            await client.create_workout(command)

        assert not isinstance(exc_info.value, TransportValidationError)
        assert exc_info.value.message == "Bad JSON"

    @pytest.mark.asyncio
    async def test_error_without_message_uses_default(self, command):
        client = client_for(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))

        with pytest.raises(WorkoutAPIError) as exc_info:
            await client.create_workout(command)

        assert exc_info.value.message == "Failed to create workout"

    @pytest.mark.asyncio
    async def test_timeout(self, command):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(WorkoutAPIUnavailable, match="timed out"):
            await client_for(handler).create_workout(command)

    @pytest.mark.asyncio
    async def test_all_failures_are_transport_errors(self, command):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("reset", request=request)

        with pytest.raises(TransportError):
            await client_for(handler).create_workout(command)


@pytest.mark.unit
@patch("infrastructure.workout_api_client.httpx.AsyncClient")
class TestConnectionRefused:
    @pytest.mark.asyncio
    async def test_connect_error(self, mock_client_class, command):
        mock_client = MagicMock()
        mock_client.post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client_class.return_value.__aexit__ = AsyncMock(return_value=False)

        client = WorkoutAPIClient(BASE_URL, timeout=5.0)
        with pytest.raises(WorkoutAPIUnavailable) as exc_info:
            await client.create_workout(command)

        assert BASE_URL in exc_info.value.message
        mock_client_class.assert_called_once_with(timeout=5.0)
