"""Show this week's facility timetable from the published booking sheet.

Standalone wrapper around src.timetable.cli for running from a checkout.

Run with: python scripts/show_timetable.py
Next week: python scripts/show_timetable.py --week-offset 1
JSON:      python scripts/show_timetable.py --json
"""

import os
import sys

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.timetable.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
