"""Pydantic models for timetable data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Start-time value the booking sheet uses for whole-day hires
FULL_DAY_SENTINEL = "Day"


class HalfDay(str, Enum):
    AM = "AM"
    PM = "PM"
    FULL_DAY = "FULL_DAY"


class Session(BaseModel):
    """A single public booking parsed from one feed row.

    Produced once per parse and discarded on the next fetch. Optional text
    fields default to an empty string, never None.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    day: str  # Day label as typed in the sheet, e.g. "Mon"
    public_name: str
    start_time: str = ""  # "HH:MM", "" or "Day"
    end_time: str = ""
    room: str = ""
    session_type: str = ""  # e.g. "Private", "Members", "Public"
    hirer: str = ""
    contact: str = ""
    contact_email: str = ""
    notes: str = ""

    @property
    def is_full_day(self) -> bool:
        return self.start_time in ("", FULL_DAY_SENTINEL)

    @property
    def time_label(self) -> str:
        """Human-readable time range ("All Day" for full-day bookings)."""
        if self.is_full_day:
            return "All Day"
        if self.start_time and self.end_time:
            return f"{self.start_time} - {self.end_time}"
        return self.start_time

    @property
    def badge(self) -> str:
        """Access badge shown next to the name: "Private", "Members" or ""."""
        session_type = self.session_type.lower()
        if "private" in session_type:
            return "Private"
        if "members" in session_type:
            return "Members"
        return ""


class DaySchedule(BaseModel):
    """Sessions for one calendar date, split into AM and PM halves.

    Full-day sessions are listed in ``am`` only.
    """

    date: dt.date
    am: list[Session] = []
    pm: list[Session] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.date.weekday()]

    @property
    def is_empty(self) -> bool:
        return not self.am and not self.pm


class WeekView(BaseModel):
    """Monday-to-Sunday timetable handed to a renderer."""

    offset: int = 0  # Weeks from the current week
    dates: list[dt.date]
    days: list[DaySchedule]

    @property
    def start(self) -> dt.date:
        return self.dates[0]

    @property
    def end(self) -> dt.date:
        return self.dates[-1]

    @property
    def is_empty(self) -> bool:
        return all(day.is_empty for day in self.days)

    @property
    def session_count(self) -> int:
        return sum(len(day.am) + len(day.pm) for day in self.days)
