"""Reminder trigger-time computation.

Decides when a note's reminder should fire based on its due date or,
without one, on its category and the user's reminder hours.
"""

from datetime import datetime, time, timedelta

from ..config.settings import Settings
from ..notes.models import Category, Note
from ..timefmt import get_timezone


def _at_hour(day: datetime, hour: int) -> datetime:
    return datetime.combine(day.date(), time(hour=hour), tzinfo=day.tzinfo)


def compute_trigger_time(
    note: Note,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> datetime | None:
    """Compute when a note's reminder should fire.

    - With a due date: the due date minus the lead minutes, if that is
      still in the future.
    - today: today at the today-hour, or one hour from now once that hour
      has passed.
    - tomorrow: tomorrow at the tomorrow-hour.
    - shopping: the next calendar day at the shopping-hour.
    - idea, other: no reminder.

    Args:
        note: Note to schedule
        now: Current time, aware (defaults to now in the settings timezone)
        settings: Reminder hours and lead minutes (defaults to Settings())

    Returns:
        Aware trigger time, or None if no reminder should be scheduled
    """
    settings = settings or Settings()
    tz = get_timezone(settings.timezone)
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz)

    if note.due_date is not None:
        trigger = note.due_date - timedelta(minutes=settings.reminder_lead_minutes)
        return trigger if trigger > now else None

    if note.category is Category.TODAY:
        target = _at_hour(now, settings.today_reminder_hour)
        if now < target:
            return target
        return now + timedelta(hours=1)

    if note.category is Category.TOMORROW:
        return _at_hour(now + timedelta(days=1), settings.tomorrow_reminder_hour)

    if note.category is Category.SHOPPING:
        return _at_hour(now + timedelta(days=1), settings.shopping_reminder_hour)

    return None


__all__ = ["compute_trigger_time"]
