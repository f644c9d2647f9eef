"""Timestamp parsing utilities."""

from datetime import datetime, timezone
from typing import Optional, Union


def now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into a timezone-aware datetime.

    Naive values are assumed to be UTC. A trailing "Z" is accepted.

    Args:
        value: ISO 8601 string, datetime, or None

    Returns:
        Aware datetime, or None if the value is missing or unparsable

    Examples:
        parse_timestamp("2025-11-13T18:45:40Z")
        # datetime(2025, 11, 13, 18, 45, 40, tzinfo=timezone.utc)

        parse_timestamp("not a date")
        # None
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def age_in_days(created_at: datetime, reference: datetime) -> float:
    """Fractional days elapsed from created_at to reference (negative if in the future)."""
    return (reference - created_at).total_seconds() / 86400.0
