"""Local notification queue.

Holds scheduled note notifications, persists pending ones in the blob
store so they survive restarts, and fires due ones through a callback.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from ..storage.blob import BlobStore
from ..timefmt import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

NOTIFICATIONS_KEY = "notifications"


class NotificationStatus(Enum):
    """Status of a scheduled notification."""

    PENDING = "pending"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


@dataclass
class Notification:
    """A scheduled notification for a note.

    Attributes:
        id: Handle returned to the scheduler.
        note_id: Note the notification belongs to.
        title: Notification title.
        body: Notification body text.
        trigger_at: When to deliver.
        status: Current status.
        created_at: When the notification was scheduled.
        delivered_at: When it was delivered, if it was.
    """

    id: str
    note_id: str
    title: str
    body: str
    trigger_at: datetime
    status: NotificationStatus
    created_at: datetime
    delivered_at: datetime | None = None

    def is_due(self, now: datetime | None = None) -> bool:
        """Check if the notification should be delivered."""
        if self.status != NotificationStatus.PENDING:
            return False
        return (now or datetime.now(UTC)) >= self.trigger_at


class NotificationQueue:
    """Manages scheduled notifications with create, cancel and delivery.

    Only pending notifications are held; cancelled and delivered ones are
    dropped once their status changes.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        on_deliver: Callable[[Notification], None] | None = None,
    ) -> None:
        """Initialize the queue and load pending notifications.

        Args:
            blob_store: Store holding pending notifications.
            on_deliver: Optional callback when a notification fires.
        """
        self._blob_store = blob_store
        self._on_deliver = on_deliver
        self._notifications: dict[str, Notification] = {}
        self._load()

    def create(self, note_id: str, title: str, body: str, trigger_at: datetime) -> Notification:
        """Schedule a notification.

        Returns:
            The scheduled Notification; its id is the cancellation handle.
        """
        notification = Notification(
            id=str(uuid.uuid4()),
            note_id=note_id,
            title=title,
            body=body,
            trigger_at=trigger_at,
            status=NotificationStatus.PENDING,
            created_at=datetime.now(UTC),
        )
        self._notifications[notification.id] = notification
        self._save()
        logger.debug(f"Scheduled notification {notification.id} for {trigger_at.isoformat()}")
        return notification

    def cancel(self, handle: str) -> bool:
        """Cancel a pending notification.

        Returns:
            True if cancelled, False if not found or no longer pending.
        """
        notification = self._notifications.get(handle)
        if notification is None or notification.status != NotificationStatus.PENDING:
            return False

        notification.status = NotificationStatus.CANCELLED
        del self._notifications[handle]
        self._save()
        return True

    def get(self, handle: str) -> Notification | None:
        """Get a pending notification by handle."""
        return self._notifications.get(handle)

    def list_pending(self) -> list[Notification]:
        """List pending notifications, soonest first."""
        pending = [
            n for n in self._notifications.values() if n.status == NotificationStatus.PENDING
        ]
        return sorted(pending, key=lambda n: n.trigger_at)

    def check_due(self, now: datetime | None = None) -> list[Notification]:
        """Deliver every pending notification whose time has come.

        Returns:
            Newly delivered notifications.
        """
        now = now or datetime.now(UTC)
        delivered = []
        for notification in self.list_pending():
            if notification.is_due(now):
                notification.status = NotificationStatus.DELIVERED
                notification.delivered_at = now
                del self._notifications[notification.id]
                delivered.append(notification)
                if self._on_deliver:
                    self._on_deliver(notification)

        if delivered:
            self._save()
        return delivered

    def _save(self) -> None:
        self._blob_store.set(
            NOTIFICATIONS_KEY,
            [
                {
                    "id": n.id,
                    "noteId": n.note_id,
                    "title": n.title,
                    "body": n.body,
                    "triggerAt": format_timestamp(n.trigger_at),
                    "createdAt": format_timestamp(n.created_at),
                }
                for n in self.list_pending()
            ],
        )

    def _load(self) -> None:
        data = self._blob_store.get(NOTIFICATIONS_KEY)
        if not isinstance(data, list):
            return

        for item in data:
            try:
                trigger_at = parse_timestamp(item["triggerAt"])
                if trigger_at is None:
                    raise ValueError("missing trigger time")
                notification = Notification(
                    id=item["id"],
                    note_id=item["noteId"],
                    title=item.get("title", ""),
                    body=item.get("body", ""),
                    trigger_at=trigger_at,
                    status=NotificationStatus.PENDING,
                    created_at=parse_timestamp(item.get("createdAt")) or datetime.now(UTC),
                )
                self._notifications[notification.id] = notification
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid notification: {e}")

        logger.info(f"Loaded {len(self._notifications)} pending notifications")


__all__ = ["NOTIFICATIONS_KEY", "Notification", "NotificationQueue", "NotificationStatus"]
