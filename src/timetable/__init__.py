"""Weekly facility timetable built from a published booking sheet.

Parses the sheet's CSV / JSON table export (feed), groups the visible
sessions into a Monday-to-Sunday week split into AM and PM (week), and
drives week-by-week navigation (controller).
"""

from src.timetable.feed import parse, parse_date
from src.timetable.models import DaySchedule, HalfDay, Session, WeekView
from src.timetable.schemas import SCHEMAS, ColumnSchema, get_schema
from src.timetable.week import bucket, week_window

__all__ = [
    "parse",
    "parse_date",
    "bucket",
    "week_window",
    "Session",
    "HalfDay",
    "DaySchedule",
    "WeekView",
    "ColumnSchema",
    "SCHEMAS",
    "get_schema",
]
