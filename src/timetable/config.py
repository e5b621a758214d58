"""Timetable configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class TimetableConfig(BaseSettings):
    """Timetable configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Feed source (Google Sheets: File -> Share -> Publish to web -> CSV)
    feed_url: str = Field(
        default="",
        description="Published spreadsheet URL (CSV or JSON table export)",
    )
    feed_schema: str = Field(
        default="v1",
        description="Column layout of the feed (see src.timetable.schemas.SCHEMAS)",
    )
    allowed_rooms: str = Field(
        default="",
        description="Comma-separated room allow-list; empty keeps the schema default",
    )

    # Transport
    request_timeout_seconds: float = Field(
        default=12.0,
        description="Timeout for a single feed request",
    )
    max_fetch_attempts: int = Field(
        default=3,
        description="Attempts per fetch before reporting the feed as unavailable",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "TIMETABLE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def room_allow_list(self) -> frozenset[str] | None:
        """Parse ``allowed_rooms`` into a set, or None when unset."""
        rooms = frozenset(r.strip() for r in self.allowed_rooms.split(",") if r.strip())
        return rooms or None


# Singleton pattern
_config: TimetableConfig | None = None


def get_config() -> TimetableConfig:
    """Get the timetable configuration singleton.

    Returns:
        TimetableConfig: Timetable configuration instance
    """
    global _config
    if _config is None:
        _config = TimetableConfig()
    return _config
