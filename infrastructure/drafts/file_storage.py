"""
File-backed draft storage.

Each key is stored as one JSON file in a directory on the local device.
Keys are percent-encoded into file names, so any template id maps to a
single file inside the directory and never escapes it.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote, unquote

from application.exceptions import DraftStorageError

logger = logging.getLogger(__name__)

DRAFT_FILE_SUFFIX = ".json"


class FileDraftStorage:
    """
    DraftStorage implementation over a local directory.

    Writes go to a temporary file that is then renamed over the target,
    so a crash mid-write never leaves a truncated draft behind.

    Usage:
        storage = FileDraftStorage(Path.home() / ".workout-logger" / "drafts")
        storage.set_item("workout_draft_abc", "{...}")
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Draft key must not be empty")
        return self._directory / f"{quote(key, safe='')}{DRAFT_FILE_SUFFIX}"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            # Unreadable bytes are a corrupt draft, not a storage failure.
            return ""
        except OSError as e:
            raise DraftStorageError(f"Failed to read draft {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=".draft-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise DraftStorageError(f"Failed to write draft {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise DraftStorageError(f"Failed to remove draft {path}: {e}") from e

    def keys(self) -> List[str]:
        if not self._directory.is_dir():
            return []
        return sorted(
            unquote(path.name[: -len(DRAFT_FILE_SUFFIX)])
            for path in self._directory.iterdir()
            if path.is_file()
            and path.name.endswith(DRAFT_FILE_SUFFIX)
            and not path.name.startswith(".draft-")
        )
