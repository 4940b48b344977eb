"""Timestamp normalization utilities for schedule times."""

from datetime import datetime, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo

from dateutil import parser as dateutil_parser


def resolve_timezone(name: Optional[str] = None) -> tzinfo:
    """Resolve an IANA timezone name, falling back to the system timezone.

    Args:
        name: Timezone name (e.g., 'Europe/Berlin'). None or empty uses
            the local timezone of the host.

    Returns:
        A tzinfo usable for aware datetimes.
    """
    if name:
        return ZoneInfo(name)
    local = datetime.now().astimezone().tzinfo
    return local if local is not None else timezone.utc


def normalize_timestamp(
    value: Any,
    default_tz: Optional[tzinfo] = None,
) -> datetime:
    """Convert various timestamp formats to an aware UTC datetime.

    Handles:
    - datetime: converted to UTC, naive values are placed in default_tz
    - int/float: Unix timestamp (auto-detects milliseconds vs seconds)
    - str: ISO format or anything else dateutil can parse
      (e.g., '2026-10-19 14:30', 'Oct 19 2026 2:30pm')

    Args:
        value: Timestamp as datetime, int, float or str
        default_tz: Timezone assumed for naive values (default UTC)

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If value cannot be parsed as a timestamp

    Example:
        >>> normalize_timestamp("2026-10-19T12:00:00Z")
        datetime.datetime(2026, 10, 19, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Values past 1e12 can only be milliseconds
        if value > 1e12:
            value = value / 1000
        return datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        if not value.strip():
            raise ValueError("Cannot parse timestamp: empty string")
        try:
            dt = dateutil_parser.parse(value)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Cannot parse timestamp: {value!r} ({e})") from e
    else:
        raise ValueError(f"Cannot parse timestamp: {value!r} (type: {type(value).__name__})")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz or timezone.utc)

    try:
        return dt.astimezone(timezone.utc)
    except OverflowError as e:
        # Valid locally but outside datetime range once shifted to UTC
        raise ValueError(f"Cannot parse timestamp: {value!r} ({e})") from e
