"""Timestamp parsing utilities."""
import math
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(s: str) -> datetime:
    """
    Parse a timestamp string into a datetime object.

    Supports multiple formats:
    - ISO format with "Z" suffix: "2024-01-02T09:10:00Z"
    - ISO format with timezone: "2024-01-02T09:10:00+00:00"
    - ISO format without timezone: "2024-01-02T09:10:00"
    - Date only: "2024-01-02"
    - Anything else dateutil understands, e.g. "Jan 2 2024 09:10"

    Naive values are taken as UTC.

    Args:
        s: Timestamp string

    Returns:
        Timezone-aware datetime object

    Raises:
        ValueError: If timestamp cannot be parsed
    """
    if not s or not s.strip():
        raise ValueError("Empty timestamp string")

    s = s.strip()

    # Convert trailing "Z" to "+00:00" for ISO format compatibility
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        try:
            dt = date_parser.parse(s)
        except (ValueError, OverflowError) as exc:
            raise ValueError(
                f"Unable to parse timestamp: {s}. Expected ISO format (e.g. '2024-01-02T09:10:00Z')"
            ) from exc

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def coerce_timestamp(value: Any) -> datetime:
    """
    Coerce a JSON value into an aware datetime.

    Strings are parsed with :func:`parse_timestamp`; numbers are epoch
    milliseconds, which is what browser clients send for ``Date.now()``.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise ValueError("Booleans are not timestamps")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError("Timestamp must be finite")
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"Timestamp out of range: {value}") from exc
    if isinstance(value, str):
        return parse_timestamp(value)
    raise ValueError(f"Unsupported timestamp value: {value!r}")
