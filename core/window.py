"""
Turns the operator's window token ("today", "yesterday", a date) into the
local-midnight timestamp used as the lower bound for `git log --since`.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser

from core.contracts.models import TimeWindow
from utils.logger import logger


def _midnight(day: date) -> TimeWindow:
    # naive local midnight, then attach the local UTC offset for that date
    return TimeWindow(since=datetime.combine(day, time.min).astimezone())


def resolve(token: Optional[str] = None, now: Optional[datetime] = None) -> TimeWindow:
    """
    Resolves a window token into a TimeWindow.

    Args:
        token: "today", "yesterday", any date string, or empty. Case-insensitive.
        now: The current local time; defaults to the wall clock.

    Returns:
        The TimeWindow at local midnight of the selected date. Unparseable
        tokens fall back to today.
    """
    now = now or datetime.now()
    today = now.date()
    value = (token or "").strip().lower()

    if not value or value == "today":
        return _midnight(today)
    if value == "yesterday":
        return _midnight(today - timedelta(days=1))

    try:
        parsed = parser.parse(value, default=datetime.combine(today, time.min))
    except (ValueError, OverflowError) as e:
        logger.warning(f"Could not parse window '{token}' ({e}); using today.")
        return _midnight(today)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return _midnight(parsed.date())
