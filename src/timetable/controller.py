"""Week navigation - owns the current week offset and drives each render cycle.

A cycle is: compute the window, tell the renderer it is loading, load the
feed, bucket it, render. Each cycle takes a RequestTicket; a ticket that is
no longer the latest issued when its feed arrives is discarded, so a slow
response for a week the user already navigated away from never overwrites
the current view.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Protocol

from src.timetable.logging import get_logger
from src.timetable.models import Session, WeekView
from src.timetable.week import bucket, week_window

log = get_logger(__name__)

LOAD_ERROR_MESSAGE = "Unable to load schedule. Please check your internet connection."

SessionLoader = Callable[[], list[Session] | None]


class Renderer(Protocol):
    """Presentation side of the timetable (HTML page, terminal, ...)."""

    def show_loading(self, window: list[date]) -> None: ...

    def show_week(self, view: WeekView) -> None: ...

    def show_error(self, message: str) -> None: ...


@dataclass(frozen=True)
class RequestTicket:
    seq: int
    offset: int
    window: list[date]


class TimetableController:
    """Holds the week offset and renders the timetable for it.

    Args:
        loader: Returns the parsed feed, or None when it could not be loaded.
        renderer: Receives loading / week / error notifications.
        today: Fixed reference date; None means the real date at each cycle.
    """

    def __init__(
        self,
        loader: SessionLoader,
        renderer: Renderer,
        today: date | None = None,
    ) -> None:
        self.loader = loader
        self.renderer = renderer
        self.today = today
        self.week_offset = 0
        self._latest_seq = 0

    def init(self) -> bool:
        """Render the current offset (0 on a fresh controller)."""
        return self._cycle()

    def change_week(self, delta: int) -> bool:
        """Move ``delta`` weeks forward (negative = back) and re-render."""
        self.week_offset += delta
        log.debug("week_changed", delta=delta, offset=self.week_offset)
        return self._cycle()

    def begin_request(self) -> RequestTicket:
        """Issue a ticket for the current offset and announce loading."""
        self._latest_seq += 1
        window = week_window(self.week_offset, today=self.today)
        ticket = RequestTicket(seq=self._latest_seq, offset=self.week_offset, window=window)
        self.renderer.show_loading(window)
        return ticket

    def complete(self, ticket: RequestTicket, sessions: list[Session] | None) -> bool:
        """Render the result of a ticket's load.

        Returns:
            True if the timetable was rendered, False if the ticket was stale
            or the feed could not be loaded.
        """
        if ticket.seq != self._latest_seq:
            log.info(
                "stale_response_discarded",
                seq=ticket.seq,
                latest=self._latest_seq,
                offset=ticket.offset,
            )
            return False

        if sessions is None:
            self.renderer.show_error(LOAD_ERROR_MESSAGE)
            return False

        view = bucket(sessions, ticket.window, offset=ticket.offset)
        log.info(
            "week_rendered",
            offset=ticket.offset,
            start=ticket.window[0].isoformat(),
            sessions=view.session_count,
        )
        self.renderer.show_week(view)
        return True

    def _cycle(self) -> bool:
        ticket = self.begin_request()
        return self.complete(ticket, self.loader())
