"""
HTTP client for the workouts API.

Handles the two calls a logging session needs:
- GET  /api/workouts/prefill/{template_id}: suggested values for a template
- POST /api/workouts: persist a completed workout

Failures are reported as TransportError subclasses so the session engine
can treat them uniformly; a 400 with field details becomes a
TransportValidationError.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from application.exceptions import TransportError, TransportValidationError
from domain.models import (
    CreateWorkoutCommand,
    CreateWorkoutResponse,
    ValidationErrorDetail,
    WorkoutPrefill,
)

logger = logging.getLogger(__name__)


class WorkoutAPIError(TransportError):
    """Raised when the workouts API returns an error response."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message, status_code=status_code)


class WorkoutAPIUnavailable(TransportError):
    """Raised when the workouts API is unreachable or times out."""

    pass


class TemplateNotFound(WorkoutAPIError):
    """Raised when the prefill endpoint doesn't know the template."""

    def __init__(self, template_id: str):
        super().__init__(f"Template not found: {template_id}", status_code=404)
        self.template_id = template_id


def _error_message(response: httpx.Response, default: str) -> str:
    """Pull the `message` out of an error body, falling back to `default`."""
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        return data["message"]
    return default


class WorkoutAPIClient:
    """
    HTTP client for workouts API communication.

    Implements the WorkoutTransport port used by the session engine.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the workouts API client.

        Args:
            base_url: Base URL of the workouts API (e.g., "http://localhost:8001")
            timeout: Request timeout in seconds
            auth_token: Optional bearer token sent with every request
            transport: Optional httpx transport (e.g. ASGITransport in tests)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._auth_token = auth_token
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"timeout": self._timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def get_prefill(self, template_id: str) -> WorkoutPrefill:
        """
        Fetch the prefill document for a template.

        Args:
            template_id: Template to log against

        Returns:
            WorkoutPrefill with suggested sets

        Raises:
            TemplateNotFound: If the API doesn't know the template
            WorkoutAPIUnavailable: If the API is not reachable
            WorkoutAPIError: If the API returns any other error
        """
        url = f"{self._base_url}/api/workouts/prefill/{quote(template_id, safe='')}"

        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._headers())
        except httpx.ConnectError as e:
            logger.error(f"Workouts API unavailable: {e}")
            raise WorkoutAPIUnavailable(
                f"Workouts API is not available at {self._base_url}"
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Workouts API timeout: {e}")
            raise WorkoutAPIUnavailable("Workouts API request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Workouts API request failed: {e}")
            raise WorkoutAPIUnavailable("Workouts API request failed") from e

        if response.status_code == 404:
            raise TemplateNotFound(template_id)
        if response.status_code != 200:
            logger.error(f"Workouts API error: {response.status_code} - {response.text}")
            raise WorkoutAPIError(
                _error_message(response, "Failed to load workout prefill"),
                response.status_code,
            )

        try:
            return WorkoutPrefill.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Malformed prefill response: {e}")
            raise WorkoutAPIError("Malformed prefill response", response.status_code) from e

    async def create_workout(self, command: CreateWorkoutCommand) -> CreateWorkoutResponse:
        """
        Persist a completed workout.

        Args:
            command: Workout to create

        Returns:
            CreateWorkoutResponse with personal-best updates

        Raises:
            TransportValidationError: If the API rejects the workout (400 with details)
            WorkoutAPIUnavailable: If the API is not reachable
            WorkoutAPIError: If the API returns any other error
        """
        url = f"{self._base_url}/api/workouts"
        payload = command.model_dump(mode="json")

        try:
            async with self._client() as client:
                response = await client.post(url, json=payload, headers=self._headers())
        except httpx.ConnectError as e:
            logger.error(f"Workouts API unavailable: {e}")
            raise WorkoutAPIUnavailable(
                f"Workouts API is not available at {self._base_url}"
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Workouts API timeout: {e}")
            raise WorkoutAPIUnavailable("Workouts API request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Workouts API request failed: {e}")
            raise WorkoutAPIUnavailable("Workouts API request failed") from e

        if response.status_code in (200, 201):
            try:
                return CreateWorkoutResponse.model_validate(response.json())
            except (ValueError, ValidationError) as e:
                logger.error(f"Malformed create-workout response: {e}")
                raise WorkoutAPIError("Failed to create workout", response.status_code) from e

        if response.status_code == 400:
            rejection = self._validation_error(response)
            if rejection is not None:
                raise rejection

        logger.error(f"Workouts API error: {response.status_code} - {response.text}")
        raise WorkoutAPIError(
            _error_message(response, "Failed to create workout"),
            response.status_code,
        )

    @staticmethod
    def _validation_error(response: httpx.Response) -> Optional[TransportValidationError]:
        """
        Build a TransportValidationError from a 400 body with a details list.

        Entries are parsed one at a time; an entry that is an object but
        not a well-formed violation is passed on raw so the session can
        skip it without losing the others.
        """
        try:
            data = response.json()
        except ValueError:
            return None
        if not isinstance(data, dict) or not isinstance(data.get("details"), list):
            return None

        details = []
        for entry in data["details"]:
            if not isinstance(entry, dict):
                continue
            try:
                details.append(ValidationErrorDetail.model_validate(entry))
            except ValidationError:
                logger.debug(f"Malformed violation in 400 body: {entry!r}")
                details.append(entry)

        error = data.get("error")
        if not isinstance(error, str) or not error:
            error = "Validation Error"
        return TransportValidationError(details, message=error)
