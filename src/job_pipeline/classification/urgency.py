"""
Urgency classification for due instants.

Maps the signed distance between a due instant and "now" to one of eight
ordered tiers, and renders a short label using the coarsest unit that still
says something useful. Both are pure functions of (due, now).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)


class Urgency(str, Enum):
    OVERDUE = 'overdue'
    CRITICAL = 'critical'
    WARNING = 'warning'
    SOON = 'soon'
    TOMORROW = 'tomorrow'
    UPCOMING = 'upcoming'
    LATER = 'later'
    NONE = 'none'

    @property
    def severity(self) -> int:
        """Higher is more urgent; NONE sits below every dated tier."""
        return _SEVERITY[self]


_SEVERITY: dict[Urgency, int] = {
    Urgency.NONE: -1,
    Urgency.LATER: 0,
    Urgency.UPCOMING: 1,
    Urgency.TOMORROW: 2,
    Urgency.SOON: 3,
    Urgency.WARNING: 4,
    Urgency.CRITICAL: 5,
    Urgency.OVERDUE: 6,
}

# Upper bounds (inclusive) for each future tier, first match wins.
_TIERS: tuple[tuple[timedelta, Urgency], ...] = (
    (HOUR, Urgency.CRITICAL),
    (4 * HOUR, Urgency.WARNING),
    (DAY, Urgency.SOON),
    (2 * DAY, Urgency.TOMORROW),
    (7 * DAY, Urgency.UPCOMING),
)


@dataclass(frozen=True)
class DueTime:
    """Urgency tier plus display label for one due instant."""

    label: str
    urgency: Urgency
    diff: timedelta | None = None

    def to_dict(self) -> dict[str, str]:
        return {'label': self.label, 'urgency': self.urgency.value}


def get_urgency(diff: timedelta) -> Urgency:
    """
    Classify the signed distance `due - now`.

    diff <= 0 is overdue; otherwise the first tier whose bound is not
    exceeded, falling through to LATER beyond seven days.
    """
    if diff <= timedelta(0):
        return Urgency.OVERDUE
    for bound, urgency in _TIERS:
        if diff <= bound:
            return urgency
    return Urgency.LATER


def format_due_label(diff: timedelta) -> str:
    """Render a label such as "3h left", "2d overdue" or "due tomorrow"."""
    total = abs(diff)
    minutes = int(total // MINUTE)
    hours = int(total // HOUR)
    days = int(total // DAY)
    weeks = days // 7

    if diff <= timedelta(0):
        if minutes < 60:
            return f'{minutes}m overdue'
        if hours < 24:
            return f'{hours}h overdue'
        if days < 7:
            return f'{days}d overdue'
        if weeks < 8:
            return f'{weeks}w overdue'
        return f'{days // 30}mo overdue'

    if minutes < 2:
        return '1m left'
    if minutes < 60:
        return f'{minutes}m left'
    if hours < 2:
        remaining = minutes - hours * 60
        return f'{hours}h {remaining}m left' if remaining > 0 else f'{hours}h left'
    if hours < 24:
        return f'{hours}h left'
    if days == 1:
        return 'due tomorrow'
    if days < 7:
        return f'due in {days} days'
    if weeks == 1:
        return 'due in 1 week'
    if weeks < 8:
        return f'due in {weeks} weeks'
    return f'due in {days // 30} months'


def format_due_time(due: datetime, now: datetime) -> DueTime:
    """Tier and label for a due instant relative to `now`."""
    diff = due - now
    return DueTime(label=format_due_label(diff), urgency=get_urgency(diff), diff=diff)


def due_time_for(due: datetime | None, now: datetime) -> DueTime:
    """Like format_due_time(), but a missing due instant maps to the NONE tier."""
    if due is None:
        return DueTime(label='No date set', urgency=Urgency.NONE)
    return format_due_time(due, now)
