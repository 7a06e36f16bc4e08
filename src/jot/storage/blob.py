"""Key-value blob store protocol and local implementations.

Each key holds one JSON-serializable structure. Stores raise
PersistenceError when a write cannot be made durable.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from ..errors import JotError

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1


class PersistenceError(JotError):
    """Raised when the blob store cannot read or write a record."""

    pass


class BlobStore(Protocol):
    """Interface for opaque key-value persistence."""

    def get(self, key: str) -> Any | None:
        """Return the stored value for key, or None if absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value under key.

        Raises:
            PersistenceError: If the value could not be persisted
        """
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


class MemoryBlobStore:
    """In-process blob store, used for tests and ephemeral sessions.

    Values are round-tripped through JSON so callers see the same shapes
    a durable store would give back.
    """

    def __init__(self) -> None:
        self._records: dict[str, str] = {}
        self._fail_writes = False

    def get(self, key: str) -> Any | None:
        raw = self._records.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        if self._fail_writes:
            raise PersistenceError(f"Failed to save {key!r}: store is read-only")
        try:
            self._records[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to save {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        self._records.pop(key, None)

    def set_read_only(self, read_only: bool = True) -> None:
        """Make subsequent writes fail, to simulate a full or broken disk."""
        self._fail_writes = read_only

    def keys(self) -> list[str]:
        """List stored keys."""
        return list(self._records)


class JSONFileBlobStore:
    """Blob store backed by a single JSON file.

    The whole file is rewritten on each set via a temporary file and an
    atomic rename, so a failed write leaves the previous file intact.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialize the store and load existing records.

        Args:
            path: Location of the JSON file. Missing file means empty store.

        Raises:
            PersistenceError: If the file cannot be read or is corrupt
        """
        self._path = Path(path).expanduser()
        self._records: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        """Get the backing file path."""
        return self._path

    def get(self, key: str) -> Any | None:
        value = self._records.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        records = dict(self._records)
        records[key] = copy.deepcopy(value)
        self._write(records)
        self._records = records

    def delete(self, key: str) -> None:
        if key not in self._records:
            return
        records = {k: v for k, v in self._records.items() if k != key}
        self._write(records)
        self._records = records

    def _write(self, records: dict[str, Any]) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w") as f:
                json.dump({"version": STORE_FORMAT_VERSION, "records": records}, f, indent=2)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write blob store {self._path}: {e}")
            raise PersistenceError(f"Could not save data to {self._path}") from e

        logger.debug(f"Saved {len(records)} records to {self._path}")

    def _load(self) -> None:
        if not self._path.exists():
            return

        try:
            with open(self._path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in blob store {self._path}: {e}")
            raise PersistenceError(f"Data file {self._path} is corrupt") from e
        except OSError as e:
            raise PersistenceError(f"Could not read {self._path}") from e

        records = data.get("records", {}) if isinstance(data, dict) else None
        if not isinstance(records, dict):
            logger.error(f"Unexpected blob store layout in {self._path}")
            raise PersistenceError(f"Data file {self._path} is corrupt")

        version = data.get("version", STORE_FORMAT_VERSION)
        if version != STORE_FORMAT_VERSION:
            logger.warning(f"Unknown blob store version: {version}")

        self._records = records
        logger.info(f"Loaded {len(self._records)} records from {self._path}")


__all__ = [
    "BlobStore",
    "JSONFileBlobStore",
    "MemoryBlobStore",
    "PersistenceError",
]
