"""Feed retrieval for the published booking sheet.

FeedClient fetches the sheet over HTTP with retry on transient failures and
hands the payload to the feed parser. Any failure that survives the retries
is reported as "no data" (None) so callers never render a partial timetable.
"""

import time
from pathlib import Path
from typing import Callable

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from src.timetable.errors import (
    FeedError,
    PermanentError,
    RateLimitError,
    TransientError,
)
from src.timetable.feed import parse
from src.timetable.logging import get_logger
from src.timetable.models import Session
from src.timetable.schemas import ColumnSchema

logger = get_logger(__name__)

_REQUEST_HEADERS = {
    # Published sheets sit behind a CDN that happily serves stale exports
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "User-Agent": "facility-timetable/0.1",
}


def _cache_buster() -> int:
    # Changes once per minute
    return int(time.time() // 60)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "feed_fetch_retry",
        attempt=retry_state.attempt_number,
        error=str(error),
        type=type(error).__name__,
    )


class FeedClient:
    """Fetches the booking sheet from its published URL.

    Usable as a context manager; the underlying requests.Session is closed on exit.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 12.0,
        max_attempts: int = 3,
        session: requests.Session | None = None,
        wait: wait_base | None = None,
    ) -> None:
        """Initialize FeedClient.

        Args:
            url: Published CSV / JSON table URL.
            timeout: Per-request timeout in seconds.
            max_attempts: Attempts before giving up on transient failures.
            session: Optional requests.Session (injected by tests).
            wait: Optional tenacity wait strategy between attempts.
        """
        if not url:
            raise ValueError("Feed URL is empty - set TIMETABLE_FEED_URL or pass --url")

        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._retrying = Retrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait if wait is not None else wait_exponential(multiplier=1, max=8),
            retry=retry_if_exception_type(TransientError),
            before_sleep=_log_retry,
            reraise=True,
        )

    def __enter__(self) -> "FeedClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get_once(self) -> str:
        try:
            resp = self.session.get(
                self.url,
                params={"cb": _cache_buster()},
                headers=_REQUEST_HEADERS,
                timeout=self.timeout,
            )
        except (requests.Timeout, requests.ConnectionError) as e:
            raise TransientError(f"Feed request failed: {e}") from e
        except requests.RequestException as e:
            raise PermanentError(f"Feed request failed: {e}") from e

        if resp.status_code == 429:
            raise RateLimitError("Feed rate limited (HTTP 429)")
        if resp.status_code >= 500:
            raise TransientError(f"Feed server error (HTTP {resp.status_code})")
        if resp.status_code >= 400:
            raise PermanentError(
                f"Feed unavailable (HTTP {resp.status_code}) - is the sheet published?"
            )
        return resp.text

    def fetch_text(self) -> str:
        """Fetch the raw feed body, retrying transient failures.

        Raises:
            TransientError: If every attempt failed transiently.
            PermanentError: On a non-retryable HTTP or request error.
        """
        text = self._retrying(self._get_once)
        logger.debug("feed_fetched", url=self.url, chars=len(text))
        return text

    def load_sessions(self, schema: ColumnSchema) -> list[Session] | None:
        """Fetch and parse the feed.

        Returns:
            Parsed sessions, or None if the feed could not be fetched or read.
        """
        return _load(self.fetch_text, schema, source=self.url)


def load_sessions_from_file(path: str | Path, schema: ColumnSchema) -> list[Session] | None:
    """Parse a feed saved to disk (same "None means no data" contract)."""

    def _read() -> str:
        try:
            return Path(path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise PermanentError(f"Cannot read feed file {path}: {e}") from e

    return _load(_read, schema, source=str(path))


def _load(
    read: Callable[[], str], schema: ColumnSchema, *, source: str
) -> list[Session] | None:
    try:
        return parse(read(), schema)
    except FeedError as e:
        logger.error(
            "feed_load_failed",
            source=source,
            error=str(e),
            type=type(e).__name__,
        )
        return None
