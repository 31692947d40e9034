"""
Draft storage adapters.

- FileDraftStorage: one JSON file per draft key in a local directory
"""

from infrastructure.drafts.file_storage import FileDraftStorage

__all__ = ["FileDraftStorage"]
