"""
Draft Storage Interface (Port).

Key-value storage for serialized session drafts, scoped to the local
device. Implementations may use files, an in-memory dict, or any other
local store. Values are opaque strings; decoding is the DraftStore's job.
"""
from typing import Iterable, Optional, Protocol


class DraftStorage(Protocol):
    """
    Abstract interface for local draft storage.

    Implementations must raise DraftStorageError when the underlying
    store fails, and never raise for a missing key.
    """

    def get_item(self, key: str) -> Optional[str]:
        """
        Read a stored value.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if nothing is stored under the key
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """
        Store a value, overwriting any previous value for the key.

        Args:
            key: Storage key
            value: Serialized draft
        """
        ...

    def remove_item(self, key: str) -> None:
        """
        Remove a stored value. Removing a missing key is a no-op.

        Args:
            key: Storage key
        """
        ...

    def keys(self) -> Iterable[str]:
        """
        List stored keys.

        Returns:
            Keys currently present in storage
        """
        ...
