"""Storage backends for derived editor artifacts."""

from builder_history.lib.storage.base import StorageBackend, StoredFile
from builder_history.lib.storage.local import LocalStorageBackend

__all__ = ["LocalStorageBackend", "StorageBackend", "StoredFile"]
