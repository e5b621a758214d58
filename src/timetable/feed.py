"""Feed parser - turns a published booking sheet into Session records.

The sheet reaches us in one of two shapes:

  CSV (File -> Share -> Publish to web -> CSV):
    Date,Day,Start,End,Room,Hirer,Contact,Session Type,Public Name,Show Online
    16/2/26,Mon,09:00,12:00,Main Hall,...,"Table Tennis, Juniors",Yes

  JSON table export:
    {"rows": [{"cells": [{"value": 0.5, "formattedValue": "12:00"}, ...]}, ...]}

Both are reduced to rows of trimmed strings first (rows_from_csv /
rows_from_table), then run through one row pipeline (parse_rows) driven by a
ColumnSchema. Bad rows are dropped and counted; only an unusable payload as a
whole raises.
"""

import csv
import datetime as dt
import io
import json
import math
import re
from collections import Counter
from typing import Any

from dateutil import parser as dateparser

from src.timetable.errors import FeedFormatError
from src.timetable.logging import get_logger
from src.timetable.models import Session
from src.timetable.schemas import ColumnSchema

log = get_logger(__name__)

Row = list[str]

# "16/2/26", "01/09/25"
_SHORT_YEAR_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})$")
# "16/02/2026"
_LONG_YEAR_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
# "2026-02-16", "2026-2-6"
_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

# Two-digit years below this are 20YY, the rest 19YY
_CENTURY_PIVOT = 50

# Two unrelated defaults: a generic parse that depends on either is incomplete
_GENERIC_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 2, 2))


# ---------------------------------------------------------------------------
# Adapters: payload -> rows of strings
# ---------------------------------------------------------------------------


def rows_from_csv(text: str) -> list[Row]:
    """Split RFC 4180 text into rows of trimmed cells.

    Quoted cells may contain commas, line breaks and doubled quotes.
    Blank lines are skipped.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    rows: list[Row] = []
    try:
        for record in reader:
            cells = [cell.strip() for cell in record]
            if any(cells):
                rows.append(cells)
    except csv.Error as e:
        raise FeedFormatError(f"Malformed CSV payload: {e}") from e
    return rows


def _cell_text(cell: Any) -> str:
    if not isinstance(cell, dict):
        return "" if cell is None else str(cell).strip()
    formatted = cell.get("formattedValue")
    if formatted not in (None, ""):
        return str(formatted).strip()
    value = cell.get("value")
    return "" if value is None else str(value).strip()


def rows_from_table(payload: dict) -> list[Row]:
    """Flatten a ``{"rows": [{"cells": [...]}]}`` table into rows of strings.

    A cell's text is its formattedValue when present, otherwise its raw value.

    Raises:
        FeedFormatError: If the payload has no ``rows`` list, or a row's
            ``cells`` is not a list.
    """
    table_rows = payload.get("rows")
    if not isinstance(table_rows, list):
        raise FeedFormatError("JSON feed has no 'rows' list")

    rows: list[Row] = []
    for table_row in table_rows:
        cells = table_row.get("cells") if isinstance(table_row, dict) else None
        if cells is not None and not isinstance(cells, list):
            raise FeedFormatError(f"JSON feed row has non-list 'cells': {type(cells).__name__}")
        rows.append([_cell_text(cell) for cell in cells or []])
    return rows


def _looks_like_html(text: str) -> bool:
    head = text[:512].lstrip().lower()
    return head.startswith("<!doctype html") or "<html" in head


def rows_from_payload(raw: str | bytes | dict) -> list[Row]:
    """Pick the adapter for a payload without the caller naming its shape.

    Raises:
        FeedFormatError: If the payload is HTML, undecodable, or not a table.
    """
    if isinstance(raw, dict):
        return rows_from_table(raw)

    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FeedFormatError(f"Feed is not UTF-8 text: {e}") from e

    if not isinstance(raw, str):
        raise FeedFormatError(f"Unsupported feed payload type {type(raw).__name__}")

    if _looks_like_html(raw):
        # Unpublished sheets answer with a Google sign-in page
        raise FeedFormatError("Expected CSV or JSON, got HTML (check sheet publishing).")

    if raw.lstrip("\ufeff \t\r\n").startswith("{"):
        try:
            payload = json.loads(raw.lstrip("\ufeff"))
        except json.JSONDecodeError as e:
            raise FeedFormatError(f"Malformed JSON feed: {e}") from e
        if not isinstance(payload, dict):
            raise FeedFormatError("JSON feed is not an object")
        return rows_from_table(payload)

    return rows_from_csv(raw)


# ---------------------------------------------------------------------------
# Field normalisation
# ---------------------------------------------------------------------------


def _safe_date(year: int, month: int, day: int) -> dt.date | None:
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None


def parse_date(text: str) -> dt.date | None:
    """Parse a sheet date, trying D/M/YY, D/M/YYYY, YYYY-M-D, then free text.

    The first format that matches decides; an impossible date such as
    31/2/26 is None rather than falling through to the next format.
    """
    text = text.strip()
    if not text:
        return None

    match = _SHORT_YEAR_RE.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        year += 2000 if year < _CENTURY_PIVOT else 1900
        return _safe_date(year, month, day)

    match = _LONG_YEAR_RE.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _safe_date(year, month, day)

    match = _ISO_RE.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _safe_date(year, month, day)

    # "February 16, 2026", "16 Feb 2026", "Mon 16 Feb 2026"
    try:
        first, second = (
            dateparser.parse(text, default=default) for default in _GENERIC_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first.date()


def normalize_time(text: str) -> str:
    """Return a start/end time as "HH:MM".

    "09:30" and sentinels like "" or "Day" pass through unchanged. A spreadsheet
    time serial (fraction of a day, 0.0-1.0) is converted: 0.5 -> "12:00".
    """
    text = text.strip()
    if not text or ":" in text:
        return text

    try:
        value = float(text)
    except ValueError:
        return text
    if not 0.0 <= value <= 1.0:
        return text

    hours = math.floor(value * 24)
    minutes = round((value * 24 - hours) * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0
    return f"{hours:02d}:{minutes:02d}"


def _cell(row: Row, index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


# ---------------------------------------------------------------------------
# Row pipeline
# ---------------------------------------------------------------------------


def _session_from_row(row: Row, schema: ColumnSchema) -> Session | str:
    """Build a Session, or return the reason the row was dropped."""
    if len(row) < schema.min_width:
        return "too_few_columns"

    if _cell(row, schema.visible).lower() != "yes":
        return "not_visible"

    date_text = _cell(row, schema.date)
    day = _cell(row, schema.day)
    public_name = _cell(row, schema.public_name)
    if not date_text or not day or not public_name:
        return "missing_required"

    date = parse_date(date_text)
    if date is None:
        return "bad_date"

    room = _cell(row, schema.room)
    if schema.allowed_rooms is not None:
        allowed = {r.strip().lower() for r in schema.allowed_rooms}
        if room.lower() not in allowed:
            return "room_not_allowed"

    return Session(
        date=date,
        day=day,
        public_name=public_name,
        start_time=normalize_time(_cell(row, schema.start_time)),
        end_time=normalize_time(_cell(row, schema.end_time)),
        room=room,
        session_type=_cell(row, schema.session_type),
        hirer=_cell(row, schema.hirer),
        contact=_cell(row, schema.contact),
        contact_email=_cell(row, schema.contact_email),
        notes=_cell(row, schema.notes),
    )


def parse_rows(rows: list[Row], schema: ColumnSchema) -> list[Session]:
    """Run the row pipeline over adapter output. The first row is the header.

    Returns:
        Sessions in source row order.
    """
    sessions: list[Session] = []
    dropped: Counter[str] = Counter()

    for line_no, row in enumerate(rows[1:], start=2):
        result = _session_from_row(row, schema)
        if isinstance(result, str):
            dropped[result] += 1
            log.debug("row_dropped", row=line_no, reason=result)
            continue
        sessions.append(result)

    log.info(
        "feed_parsed",
        schema=schema.name,
        rows=max(len(rows) - 1, 0),
        sessions=len(sessions),
        dropped=dict(dropped),
    )
    return sessions


def parse(raw: str | bytes | dict, schema: ColumnSchema) -> list[Session]:
    """Parse a whole feed payload into Sessions.

    Raises:
        FeedFormatError: If the payload as a whole cannot be read.
    """
    return parse_rows(rows_from_payload(raw), schema)
