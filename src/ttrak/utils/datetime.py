"""Utilities for datetime handling."""

from datetime import UTC, datetime


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_iso(dt: datetime) -> str:
    """Convert datetime to ISO format string with a 'Z' suffix for UTC."""
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def from_iso(value: str) -> datetime:
    """Parse ISO format string to an aware datetime."""
    # Handle both 'Z' suffix and explicit timezone
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        # Naive timestamps are treated as UTC
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def minutes_between(earlier: datetime, later: datetime) -> float:
    """Elapsed minutes from earlier to later (negative if reversed)."""
    return (later - earlier).total_seconds() / 60
