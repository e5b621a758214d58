"""Error hierarchy for feed retrieval and decoding.

Transient failures (network timeouts, 5xx, rate limits) are retried by the
tenacity decorator in the feed client; permanent failures are not.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    def fetch_text(self) -> str:
        ...

Row-level defects never raise: the parser drops the row and moves on.
"""


class FeedError(Exception):
    """Base exception for all feed errors."""

    pass


class TransientError(FeedError):
    """Temporary failure that may succeed on retry.

    Examples: connection reset, read timeout, 503 Service Unavailable.
    """

    pass


class RateLimitError(TransientError):
    """Rate limit exceeded (HTTP 429).

    Inherits from TransientError so tenacity will retry it.
    """

    pass


class PermanentError(FeedError):
    """Failure that won't succeed on retry.

    Examples: 404 on an unpublished sheet, 403 on a private sheet.
    """

    pass


class FeedFormatError(PermanentError):
    """The payload arrived but is not a usable CSV or JSON table.

    Raised for HTML interstitials (sheet not published / sign-in page) and
    for JSON that does not have the ``{"rows": [...]}`` shape.
    """

    pass
