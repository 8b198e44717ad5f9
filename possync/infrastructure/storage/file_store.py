"""
File-backed key-value store.

One file per key inside a data directory. Writes go to a temporary file
that is fsynced and atomically renamed over the previous version, so a
crash leaves either the old or the new blob, never a torn one.
"""

import asyncio
import os
import re
from pathlib import Path

from possync.config import get_logger
from possync.core.exceptions import StorageCorruptError, StorageReadError, StorageWriteError
from possync.core.interfaces import IKeyValueStore

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class FileKeyValueStore(IKeyValueStore):
    """Persistent blob storage in plain files."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """File holding the blob for key."""
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageReadError(key, str(e)) from e

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            # Readable but garbled: the caller may quarantine and replace it
            raise StorageCorruptError(
                key, str(e), data.decode("utf-8", errors="backslashreplace")
            ) from e

    def _write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error("file_store_write_failed", path=str(path), error=str(e))
            raise StorageWriteError(key, str(e)) from e
