"""MongoDB-backed blob store.

Stores one document per key in a single collection:
{"_id": key, "value": <json>, "updated_at": <datetime>}.
"""

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from functools import wraps
from typing import Any, TypeVar

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from .blob import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_connection_failure(
    max_retries: int = 3,
    base_delay: float = 0.5,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for exponential backoff retry on connection failures.

    Args:
        max_retries: Maximum number of attempts.
        base_delay: Base delay in seconds (doubles each retry).

    Returns:
        Decorated function with retry logic.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                    last_exception = e
                    if attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            "Connection failed (attempt %d/%d), retrying in %.1fs: %s",
                            attempt + 1,
                            max_retries,
                            delay,
                            str(e),
                        )
                        time.sleep(delay)
                    else:
                        logger.error(
                            "Connection failed after %d attempts: %s",
                            max_retries,
                            str(e),
                        )

            if last_exception:
                raise last_exception
            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator


class MongoBlobStore:
    """Blob store persisting each key as a MongoDB document."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize with a MongoDB collection.

        Args:
            collection: Collection holding one document per key.
        """
        self._collection = collection

    @classmethod
    def connect(
        cls,
        uri: str = "mongodb://localhost:27017",
        database_name: str = "jot",
        collection_name: str = "blobs",
        server_selection_timeout_ms: int = 5000,
    ) -> "MongoBlobStore":
        """Connect to MongoDB and return a store.

        Raises:
            PersistenceError: If the server cannot be reached.
        """
        client: MongoClient[dict[str, Any]] = MongoClient(
            uri, serverSelectionTimeoutMS=server_selection_timeout_ms
        )
        try:
            client.admin.command("ping")
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error("Failed to connect to MongoDB: %s", str(e))
            raise PersistenceError(f"Cannot reach MongoDB at {uri}") from e

        logger.info("Connected to MongoDB at %s", uri)
        return cls(client[database_name][collection_name])

    def get(self, key: str) -> Any | None:
        try:
            doc = self._find(key)
        except PyMongoError as e:
            raise PersistenceError(f"Could not read {key!r}: {e}") from e
        return doc.get("value") if doc else None

    def set(self, key: str, value: Any) -> None:
        try:
            self._replace(key, value)
        except PyMongoError as e:
            logger.error("Failed to save %s: %s", key, str(e))
            raise PersistenceError(f"Could not save {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise PersistenceError(f"Could not delete {key!r}: {e}") from e

    @retry_on_connection_failure()
    def _find(self, key: str) -> dict[str, Any] | None:
        return self._collection.find_one({"_id": key})

    @retry_on_connection_failure()
    def _replace(self, key: str, value: Any) -> None:
        self._collection.replace_one(
            {"_id": key},
            {"_id": key, "value": value, "updated_at": datetime.now(UTC)},
            upsert=True,
        )


__all__ = ["MongoBlobStore", "retry_on_connection_failure"]
