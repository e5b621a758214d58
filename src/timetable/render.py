"""Plain-text and JSON rendering of a WeekView for the command line."""

import json
import sys
from datetime import date
from typing import TextIO

from src.timetable.models import Session, WeekView

EMPTY_WEEK_TEXT = "(no sessions this week)"


def format_date_short(d: date) -> str:
    """Format a date as "16 Feb"."""
    return f"{d.day} {d.strftime('%b')}"


def week_label(view: WeekView) -> str:
    return f"Week of {format_date_short(view.start)} - {format_date_short(view.end)}"


def _session_name(session: Session) -> str:
    if session.badge:
        return f"{session.public_name} [{session.badge}]"
    return session.public_name


def format_week(view: WeekView) -> str:
    """Format a week as a human-readable table.

    Columns: Day | Slot | Time | Session | Room
    """
    if view.is_empty:
        return f"{week_label(view)}\n{EMPTY_WEEK_TEXT}"

    headers = ["Day", "Slot", "Time", "Session", "Room"]

    rows = []
    for day in view.days:
        day_text = f"{day.day_name} {format_date_short(day.date)}"
        for slot, sessions in (("AM", day.am), ("PM", day.pm)):
            for session in sessions:
                rows.append(
                    [day_text, slot, session.time_label, _session_name(session), session.room or "-"]
                )

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)

    row_lines = []
    for row in rows:
        row_lines.append(
            " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip()
        )

    return "\n".join([week_label(view), header_line, separator, *row_lines])


def week_to_json(view: WeekView) -> dict:
    return view.model_dump(mode="json")


class TextRenderer:
    """Renderer that prints the timetable (or JSON) to a stream."""

    def __init__(self, stream: TextIO | None = None, *, as_json: bool = False) -> None:
        self.stream = stream or sys.stdout
        self.as_json = as_json
        self.error: str | None = None

    def show_loading(self, window: list[date]) -> None:
        # Nothing to draw in a one-shot terminal run
        pass

    def show_week(self, view: WeekView) -> None:
        if self.as_json:
            print(json.dumps(week_to_json(view), indent=2), file=self.stream)
        else:
            print(format_week(view), file=self.stream)

    def show_error(self, message: str) -> None:
        self.error = message
        print(f"ERROR: {message}", file=sys.stderr)
