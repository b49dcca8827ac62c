"""
Utility helpers for the Job Pipeline ops core.

Workflows never read the wall clock directly; they take a Clock so tests
can pin "now".
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def to_store_timestamp(value: datetime) -> str:
    """Render an instant the way the store writes them: UTC, milliseconds, 'Z'."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace(
        '+00:00', 'Z'
    )
