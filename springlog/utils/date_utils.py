"""Date and time utility functions."""
from datetime import datetime
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_timestamp(now: Optional[datetime] = None) -> str:
    """
    Format the current local time as a display timestamp.

    Args:
        now: Override for the current time (tests)

    Returns:
        Timestamp string (e.g., "2026-03-20 10:00:00")
    """
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(timestamp: str) -> datetime:
    """
    Parse a display timestamp.

    Accepts "YYYY-MM-DD HH:MM:SS" as well as ISO 8601 strings, which the
    remote store returns for timestamp columns.

    Raises:
        ValueError: If the timestamp cannot be parsed
    """
    try:
        return datetime.strptime(timestamp, TIMESTAMP_FORMAT)
    except (TypeError, ValueError):
        pass

    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid timestamp format: {timestamp}") from e


def timestamp_date(timestamp: str) -> str:
    """Return the date part of a timestamp for compact table display."""
    if not timestamp:
        return ""
    return timestamp.replace("T", " ").split(" ")[0]
