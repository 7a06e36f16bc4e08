"""Reminders module for Jot.

Computes reminder times for notes and manages the local notification queue.
"""

from .queue import Notification, NotificationQueue, NotificationStatus
from .scheduler import ReminderScheduler, truncate_text
from .triggers import compute_trigger_time

__all__ = [
    "Notification",
    "NotificationQueue",
    "NotificationStatus",
    "ReminderScheduler",
    "compute_trigger_time",
    "truncate_text",
]
