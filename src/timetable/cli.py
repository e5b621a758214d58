"""Print the facility timetable for a week as a table or JSON.

Run with: timetable
Next week: timetable --week-offset 1
Several:   timetable --weeks 3
JSON:      timetable --json
Offline:   timetable --file data/public-calendar.csv --schema v1

The feed URL and schema default to TIMETABLE_FEED_URL / TIMETABLE_FEED_SCHEMA
(environment or .env).

Exit codes:
  0 = success (including a week with no sessions)
  1 = feed could not be loaded (message on stderr)
  2 = invalid arguments
"""

import argparse
import sys
from datetime import date
from functools import partial

from dotenv import load_dotenv

from src.timetable.client import FeedClient, load_sessions_from_file
from src.timetable.config import get_config
from src.timetable.controller import TimetableController
from src.timetable.logging import get_logger, setup_logging
from src.timetable.render import TextRenderer
from src.timetable.schemas import SCHEMAS, get_schema

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="timetable",
        description="Show the weekly facility timetable from the published booking sheet.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--week-offset",
        type=int,
        default=0,
        help="Weeks from the current week (default: 0, negative = past).",
    )
    parser.add_argument(
        "--weeks",
        type=int,
        default=1,
        help="Number of consecutive weeks to print (default: 1).",
    )
    parser.add_argument(
        "--schema",
        choices=sorted(SCHEMAS),
        default=config.feed_schema,
        help=f"Column layout of the feed (default: {config.feed_schema}).",
    )

    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "--url",
        type=str,
        default=None,
        help="Published CSV / JSON URL (default: TIMETABLE_FEED_URL).",
    )
    source_group.add_argument(
        "--file",
        type=str,
        default=None,
        help="Read the feed from a local file instead of the network.",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output the week as JSON instead of a table.",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Pretend today is YYYY-MM-DD (default: the real date).",
    )
    args = parser.parse_args(argv)
    if args.weeks < 1:
        parser.error("--weeks must be at least 1")
    return args


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    args = _parse_args(argv)

    try:
        schema = get_schema(args.schema, allowed_rooms=config.room_allow_list())
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    renderer = TextRenderer(as_json=args.json)
    client: FeedClient | None = None
    if args.file:
        loader = partial(load_sessions_from_file, args.file, schema)
    else:
        try:
            client = FeedClient(
                args.url or config.feed_url,
                timeout=config.request_timeout_seconds,
                max_attempts=config.max_fetch_attempts,
            )
        except ValueError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2
        loader = partial(client.load_sessions, schema)

    controller = TimetableController(loader, renderer, today=args.today)
    log.debug("timetable_starting", schema=schema.name, offset=args.week_offset)
    try:
        ok = controller.change_week(args.week_offset) if args.week_offset else controller.init()
        for _ in range(args.weeks - 1):
            if not ok:
                break
            ok = controller.change_week(1)
    finally:
        if client is not None:
            client.close()

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
