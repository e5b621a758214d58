"""Week assembly - Monday-to-Sunday windows and AM/PM bucketing.

Both operations are pure: the window is recomputed from "today" on every
call, and bucketing never mutates the sessions it is given.
"""

import re
from datetime import date, timedelta

from src.timetable.models import FULL_DAY_SENTINEL, DaySchedule, HalfDay, Session, WeekView

DAYS_IN_WEEK = 7

_LEADING_HOUR_RE = re.compile(r"^\s*(\d+)")


def monday_of(day: date) -> date:
    """Return the Monday of the Monday-to-Sunday week containing ``day``."""
    # weekday() returns 0 for Monday, 6 for Sunday
    return day - timedelta(days=day.weekday())


def week_window(offset: int = 0, today: date | None = None) -> list[date]:
    """Compute the 7 dates (Mon-Sun) of the week ``offset`` weeks from today.

    Args:
        offset: Weeks relative to the current week (0 = this week, -1 = last).
        today: Reference date; defaults to the local date at call time.

    Returns:
        Seven consecutive dates, the first one a Monday.
    """
    if today is None:
        today = date.today()

    monday = monday_of(today) + timedelta(weeks=offset)
    return [monday + timedelta(days=i) for i in range(DAYS_IN_WEEK)]


def time_of_day(start_time: str) -> HalfDay:
    """Classify a start time as AM, PM, or a full-day booking.

    "" and "Day" are full-day. Otherwise the leading hour decides: before
    12 is AM, anything else (including a start with no leading hour digits,
    e.g. "TBC") is PM.
    """
    if not start_time or start_time.strip() in ("", FULL_DAY_SENTINEL):
        return HalfDay.FULL_DAY

    match = _LEADING_HOUR_RE.match(start_time)
    if not match:
        return HalfDay.PM
    return HalfDay.AM if int(match.group(1)) < 12 else HalfDay.PM


def bucket(sessions: list[Session], window: list[date], offset: int = 0) -> WeekView:
    """Group sessions into the days of ``window``, each split into AM and PM.

    Full-day sessions go in the AM half only. Within a half, sessions keep
    their feed order.
    """
    days: list[DaySchedule] = []
    for day in window:
        am: list[Session] = []
        pm: list[Session] = []
        for session in sessions:
            if session.date != day:
                continue
            if time_of_day(session.start_time) is HalfDay.PM:
                pm.append(session)
            else:
                am.append(session)
        days.append(DaySchedule(date=day, am=am, pm=pm))

    return WeekView(offset=offset, dates=list(window), days=days)
