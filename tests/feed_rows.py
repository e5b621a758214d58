"""Builders for booking-sheet rows and a renderer that records what it is shown."""

import csv
import io

V1_HEADER = [
    "Date", "Day", "Start", "End", "Room", "Hirer", "Contact",
    "Session Type", "Public Name", "Show Online", "Contact Email",
]

V2_HEADER = [
    "Date", "Day", "Start", "End", "Room", "Hirer", "Contact", "Contact Email",
    "Phone", "Session Type", "Public Name", "Show Online", "Notes", "Invoice", "Paid",
]


def v1_row(
    date_text="16/2/26",
    day="Mon",
    start="09:00",
    end="12:00",
    room="Main Hall",
    session_type="Public",
    public_name="Table Tennis",
    visible="Yes",
    contact_email="",
):
    return [
        date_text, day, start, end, room, "Hirer Ltd", "Jo Bloggs",
        session_type, public_name, visible, contact_email,
    ]


def v2_row(
    date_text="16/02/2026",
    day="Mon",
    start="18:00",
    end="20:00",
    room="Sports Hall",
    session_type="Members",
    public_name="Pickleball",
    visible="Yes",
    notes="",
):
    return [
        date_text, day, start, end, room, "Club", "Sam", "sam@example.com",
        "0123", session_type, public_name, visible, notes, "INV-1", "Y",
    ]


def to_csv(rows):
    out = io.StringIO()
    csv.writer(out, lineterminator="\n").writerows(rows)
    return out.getvalue()


class RecordingRenderer:
    def __init__(self):
        self.events = []

    def show_loading(self, window):
        self.events.append(("loading", window))

    def show_week(self, view):
        self.events.append(("week", view))

    def show_error(self, message):
        self.events.append(("error", message))

    @property
    def weeks(self):
        return [payload for kind, payload in self.events if kind == "week"]

    @property
    def errors(self):
        return [payload for kind, payload in self.events if kind == "error"]
