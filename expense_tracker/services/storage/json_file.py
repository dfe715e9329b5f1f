"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on disk holds every slot.
1. The user can open the file and read their data
2. No database setup required
3. Personal-use volumes fit comfortably in memory

Writes go to a temporary file in the same directory which then replaces
the target via os.replace, so a crash mid-write leaves the previous file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

import structlog

from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as one JSON object file.

    The file is read once, on first access. Every write rewrites the
    whole file.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._data: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the file, treating anything unusable as an empty store."""
        if self._data is not None:
            return self._data

        data: dict[str, str] = {}
        if self._path.exists():
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning(
                    "storage_file_unreadable",
                    path=str(self._path),
                    error=str(e),
                )
                raw = {}

            if isinstance(raw, dict):
                data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
            else:
                logger.warning(
                    "storage_file_not_an_object",
                    path=str(self._path),
                    found=type(raw).__name__,
                )

        self._data = data
        return data

    def _flush(self, data: dict[str, str]) -> None:
        """Atomically replace the file with ``data``."""
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self._path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self._path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        self._flush(data)
        self._data = data
        logger.debug("storage_slot_written", key=key, path=str(self._path))

    def set_many(self, items: Mapping[str, str]) -> None:
        data = dict(self._load())
        data.update(items)
        self._flush(data)
        self._data = data
        logger.debug("storage_slots_written", keys=sorted(items), path=str(self._path))

    def delete(self, key: str) -> bool:
        data = dict(self._load())
        if key not in data:
            return False
        del data[key]
        self._flush(data)
        self._data = data
        return True

    def keys(self) -> list[str]:
        return list(self._load().keys())
