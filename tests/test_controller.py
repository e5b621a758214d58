from datetime import date

from src.timetable.controller import LOAD_ERROR_MESSAGE, TimetableController
from src.timetable.feed import parse
from src.timetable.models import Session
from src.timetable.schemas import PUBLIC_CALENDAR_V1
from tests.feed_rows import V1_HEADER, to_csv, v1_row

FEED = to_csv(
    [
        V1_HEADER,
        v1_row(date_text="16/2/26", start="09:00", public_name="Yoga"),
        v1_row(date_text="18/2/26", start="18:00", public_name="Pickleball"),
        v1_row(date_text="24/2/26", start="Day", public_name="Tournament"),
        v1_row(date_text="16/2/26", visible="No", public_name="Hidden"),
    ]
)


def _loader():
    return parse(FEED, PUBLIC_CALENDAR_V1)


def test_init_renders_current_week(renderer, wednesday):
    controller = TimetableController(_loader, renderer, today=wednesday)

    assert controller.init() is True
    (view,) = renderer.weeks
    assert view.offset == 0
    assert view.start == date(2026, 2, 16)
    assert [s.public_name for s in view.days[0].am] == ["Yoga"]
    assert [s.public_name for s in view.days[2].pm] == ["Pickleball"]
    assert renderer.events[0][0] == "loading"


def test_change_week_moves_offset_and_refetches(renderer, wednesday):
    calls = []

    def loader():
        calls.append(1)
        return _loader()

    controller = TimetableController(loader, renderer, today=wednesday)
    controller.init()
    controller.change_week(1)
    controller.change_week(-2)

    assert controller.week_offset == -1
    assert len(calls) == 3
    offsets = [view.offset for view in renderer.weeks]
    assert offsets == [0, 1, -1]
    next_week = renderer.weeks[1]
    assert [s.public_name for s in next_week.days[1].am] == ["Tournament"]


def test_empty_week_is_rendered_not_an_error(renderer, wednesday):
    controller = TimetableController(_loader, renderer, today=wednesday)
    controller.change_week(5)

    (view,) = renderer.weeks
    assert view.is_empty
    assert renderer.errors == []


def test_load_failure_shows_error_and_no_timetable(renderer, wednesday):
    controller = TimetableController(lambda: None, renderer, today=wednesday)

    assert controller.init() is False
    assert renderer.errors == [LOAD_ERROR_MESSAGE]
    assert renderer.weeks == []


def test_stale_response_is_discarded(renderer, wednesday):
    controller = TimetableController(_loader, renderer, today=wednesday)

    slow = controller.begin_request()
    controller.week_offset += 1
    fast = controller.begin_request()

    assert controller.complete(fast, _loader()) is True
    assert controller.complete(slow, _loader()) is False
    assert [view.offset for view in renderer.weeks] == [1]


def test_stale_failure_does_not_show_error(renderer, wednesday):
    controller = TimetableController(_loader, renderer, today=wednesday)

    slow = controller.begin_request()
    fast = controller.begin_request()
    controller.complete(fast, [])
    controller.complete(slow, None)

    assert renderer.errors == []


def test_ticket_keeps_offset_from_dispatch(renderer, wednesday):
    controller = TimetableController(_loader, renderer, today=wednesday)
    ticket = controller.begin_request()
    controller.week_offset = 3

    controller.complete(ticket, [Session(date=date(2026, 2, 17), day="Tue", public_name="Chess")])

    (view,) = renderer.weeks
    assert view.offset == 0
    assert view.days[1].am[0].public_name == "Chess"
