"""Local persistence for Jot.

Provides an opaque key-value blob store with in-memory, JSON file and
MongoDB backends.
"""

import logging
from typing import TYPE_CHECKING

from .blob import BlobStore, JSONFileBlobStore, MemoryBlobStore, PersistenceError

if TYPE_CHECKING:
    from ..config import StorageConfig

logger = logging.getLogger(__name__)


def create_blob_store(config: "StorageConfig | None" = None) -> BlobStore:
    """Create a blob store for the configured backend.

    Args:
        config: Storage configuration. None means an in-memory store.

    Returns:
        BlobStore implementation

    Raises:
        ValueError: If the backend name is unknown.
        PersistenceError: If the backend cannot be opened.
    """
    if config is None or config.backend == "memory":
        return MemoryBlobStore()

    if config.backend == "json":
        return JSONFileBlobStore(config.path)

    if config.backend == "mongo":
        from .mongo import MongoBlobStore

        return MongoBlobStore.connect(uri=config.mongo_uri, database_name=config.database)

    raise ValueError(f"Unknown storage backend: {config.backend}")


__all__ = [
    "BlobStore",
    "JSONFileBlobStore",
    "MemoryBlobStore",
    "PersistenceError",
    "create_blob_store",
]
