"""Local filesystem storage backend."""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path

from builder_history.lib.storage.base import StoredFile


class LocalStorageBackend:
    """Store files under a base directory, keyed by relative path."""

    def __init__(self, base_path: Path, store_name: str = "css") -> None:
        self._base_path = base_path
        self._store_name = store_name

    async def put(self, key: str, data: bytes, content_type: str) -> StoredFile:
        path = self._key_to_path(key)
        await asyncio.to_thread(self._write_file, path, data)
        return StoredFile(
            key=key,
            url=self._build_url(key),
            content_type=content_type,
            size=len(data),
            content_hash=hashlib.sha256(data).hexdigest(),
        )

    async def get(self, key: str) -> bytes:
        path = self._key_to_path(key)
        return await asyncio.to_thread(path.read_bytes)

    async def delete(self, key: str) -> None:
        path = self._key_to_path(key)
        await asyncio.to_thread(path.unlink, missing_ok=True)

    async def exists(self, key: str) -> bool:
        path = self._key_to_path(key)
        return await asyncio.to_thread(path.exists)

    def _key_to_path(self, key: str) -> Path:
        path = (self._base_path / key).resolve()
        if not path.is_relative_to(self._base_path.resolve()):
            raise ValueError(f"Storage key escapes the store: {key!r}")
        return path

    def _build_url(self, key: str) -> str:
        return f"/storage/{self._store_name}/{key}"

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
