"""
Local draft persistence for logging sessions.

Drafts are JSON envelopes stored through a DraftStorage port under a key
derived from the template id:

    {"version": 1, "saved_at": "...", "session": {...}}

Anything that can't be decoded back into a Session for the same template
is treated as absent and removed, so a bad draft never blocks a session
from starting.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from application.exceptions import DraftDecodeError
from application.ports.draft_storage import DraftStorage
from domain.models import Session

logger = logging.getLogger(__name__)

DRAFT_KEY_PREFIX = "workout_draft_"
DRAFT_FORMAT_VERSION = 1


def draft_key(template_id: str) -> str:
    """Storage key for a template's draft."""
    return f"{DRAFT_KEY_PREFIX}{template_id}"


class DraftEnvelope(BaseModel):
    """Versioned wrapper around a serialized session."""

    version: int = Field(default=DRAFT_FORMAT_VERSION)
    saved_at: datetime
    session: Session


def encode_draft(session: Session, *, saved_at: Optional[datetime] = None) -> str:
    """Serialize a session into a draft envelope."""
    envelope = DraftEnvelope(
        version=DRAFT_FORMAT_VERSION,
        saved_at=saved_at or datetime.now(timezone.utc),
        session=session,
    )
    return envelope.model_dump_json()


def decode_draft(raw: str, *, template_id: Optional[str] = None) -> Session:
    """
    Deserialize a draft envelope.

    Args:
        raw: Stored draft text
        template_id: If given, the draft must belong to this template

    Raises:
        DraftDecodeError: If the draft is malformed, from another format
            version, or belongs to a different template.
    """
    try:
        envelope = DraftEnvelope.model_validate_json(raw)
    except ValidationError as e:
        raise DraftDecodeError(f"Invalid draft: {e.error_count()} validation error(s)") from e

    if envelope.version != DRAFT_FORMAT_VERSION:
        raise DraftDecodeError(f"Unsupported draft version {envelope.version}")
    if template_id is not None and envelope.session.template_id != template_id:
        raise DraftDecodeError(
            f"Draft belongs to template {envelope.session.template_id}, expected {template_id}"
        )
    return envelope.session


class DraftStore:
    """
    Load, save and clear the draft of a logging session.

    Usage:
        >>> store = DraftStore(FileDraftStorage(Path("~/.workout-logger/drafts")))
        >>> store.save(session.template_id, session)
        >>> resumed = store.load(session.template_id)
        >>> store.clear(session.template_id)
    """

    def __init__(
        self,
        storage: DraftStorage,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Args:
            storage: Key-value storage to keep drafts in
            clock: Returns the current time for `saved_at` (defaults to UTC now)
        """
        self._storage = storage
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def load(self, template_id: str) -> Optional[Session]:
        """
        Load the draft for a template.

        Returns:
            The stored session, or None if there is no draft or it is
            corrupt. Corrupt drafts are removed from storage.

        Raises:
            DraftStorageError: If the storage itself can't be read.
        """
        key = draft_key(template_id)
        raw = self._storage.get_item(key)
        if raw is None:
            return None

        try:
            session = decode_draft(raw, template_id=template_id)
        except DraftDecodeError as e:
            logger.warning(f"Discarding corrupt draft {key}: {e}")
            self._storage.remove_item(key)
            return None

        logger.debug(f"Loaded draft {key}")
        return session

    def save(self, template_id: str, session: Session) -> None:
        """
        Persist the full session, overwriting any previous draft.

        Raises:
            DraftStorageError: If the write fails.
        """
        if session.template_id != template_id:
            raise ValueError(
                f"Session belongs to template {session.template_id}, not {template_id}"
            )
        self._storage.set_item(draft_key(template_id), encode_draft(session, saved_at=self._clock()))
        logger.debug(f"Saved draft {draft_key(template_id)}")

    def clear(self, template_id: str) -> None:
        """Remove the draft for a template (no-op if absent)."""
        self._storage.remove_item(draft_key(template_id))
        logger.debug(f"Cleared draft {draft_key(template_id)}")

    def exists(self, template_id: str) -> bool:
        """True if something is stored for the template (decodable or not)."""
        return self._storage.get_item(draft_key(template_id)) is not None

    def list_template_ids(self) -> List[str]:
        """Template ids that currently have a stored draft."""
        return sorted(
            key[len(DRAFT_KEY_PREFIX):]
            for key in self._storage.keys()
            if key.startswith(DRAFT_KEY_PREFIX)
        )
