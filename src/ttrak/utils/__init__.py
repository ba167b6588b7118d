"""Utility functions."""

from .datetime import from_iso, minutes_between, now_utc, to_iso

__all__ = [
    "from_iso",
    "minutes_between",
    "now_utc",
    "to_iso",
]
