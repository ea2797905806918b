"""
Shared utility functions for the dashboard.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def today_iso() -> str:
    """Today's date as YYYY-MM-DD, the format every record date uses."""
    return utc_now().date().isoformat()


def timestamp_iso() -> str:
    """Current UTC time in ISO-8601 with millisecond precision and a Z suffix."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
