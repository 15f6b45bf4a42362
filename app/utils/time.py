"""
Time utilities. All timestamps in the dispatcher are UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_naive() -> datetime:
    """Current UTC time without tzinfo, as stored in database columns."""
    return utc_now().replace(tzinfo=None)


def to_rfc3339(dt: datetime) -> str:
    """
    Format a datetime as an RFC 3339 string in UTC.

    Args:
        dt: Datetime to format (naive values are assumed to be UTC)

    Returns:
        String like "2024-05-01T12:30:00Z"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
