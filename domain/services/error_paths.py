"""
Mapping of server-side validation failures back onto session sets.

The workouts API reports violations as dotted paths into the request
body, e.g. ``exercises.1.sets.0.reps``. Paths are parsed into a typed
SetErrorPath; anything that doesn't parse, or points outside the
session, is ignored.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from domain.models.session import Session
from domain.models.submission import ValidationErrorDetail

logger = logging.getLogger(__name__)

# exercises.<int>.sets.<int>[.<field>]
_SET_PATH_PATTERN = re.compile(r"^exercises\.([0-9]+)\.sets\.([0-9]+)(?:\.([A-Za-z_][A-Za-z0-9_]*))?$")

FIX_VALIDATION_ERRORS = "Please fix the validation errors."

# Raw mappings are entries that did not parse as ValidationErrorDetail.
ErrorDetail = Union[ValidationErrorDetail, Mapping[str, Any]]


@dataclass(frozen=True)
class SetErrorPath:
    """Location of a set-level violation in the submitted workout."""

    exercise_index: int
    set_index: int
    field: Optional[str] = None


def parse_error_path(path: object) -> Optional[SetErrorPath]:
    """
    Parse a violation path into a SetErrorPath.

    Fails closed: anything that is not exactly
    ``exercises.<n>.sets.<m>`` (optionally followed by a field name)
    returns None instead of raising.

    Examples:
        >>> parse_error_path("exercises.1.sets.0.reps")
        SetErrorPath(exercise_index=1, set_index=0, field='reps')
        >>> parse_error_path("exercises.1.sets") is None
        True
        >>> parse_error_path("exercises.-1.sets.0.reps") is None
        True
    """
    if not isinstance(path, str):
        return None
    match = _SET_PATH_PATTERN.match(path.strip())
    if match is None:
        return None
    return SetErrorPath(
        exercise_index=int(match.group(1)),
        set_index=int(match.group(2)),
        field=match.group(3),
    )


def _detail_parts(detail: ErrorDetail) -> tuple[object, object]:
    if isinstance(detail, ValidationErrorDetail):
        return detail.field, detail.message
    if isinstance(detail, Mapping):
        return detail.get("field"), detail.get("message")
    return None, None


def apply_server_errors(session: Session, details: Iterable[ErrorDetail]) -> int:
    """
    Put server violation messages onto the sets they point at.

    Only the addressed sets are touched. Malformed, unknown or
    out-of-range paths are skipped.

    Args:
        session: Session to update (mutated).
        details: Violations as returned by the workouts API.

    Returns:
        Number of violations applied to a set.
    """
    applied = 0
    for detail in details:
        field, message = _detail_parts(detail)
        path = parse_error_path(field)
        if path is None or not isinstance(message, str):
            logger.debug(f"Ignoring server violation with unmapped path: {field!r}")
            continue
        if not session.has_set(path.exercise_index, path.set_index):
            logger.debug(f"Ignoring server violation outside session bounds: {field!r}")
            continue
        session.exercises[path.exercise_index].sets[path.set_index].error = message
        applied += 1
    return applied
