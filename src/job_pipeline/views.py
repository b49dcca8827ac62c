"""
Dashboard view tags and stale-view signalling.

Workflows do not render anything; after a successful write they mark the
views whose contents changed as stale so the presentation layer refetches.
"""

from enum import Enum
from typing import Iterable, Protocol

import structlog

logger = structlog.get_logger(__name__)


class View(str, Enum):
    """Cache tag of each dashboard view."""

    APPROVE = 'jobs-approve'
    BUILDING = 'jobs-building'
    INBOX = 'jobs-inbox'
    CLOSING = 'jobs-closing'
    READY_TO_SEND = 'jobs-ready-to-send'
    PIPELINE = 'jobs-pipeline'


class ViewInvalidator(Protocol):
    """Receiver of "these views are stale" signals."""

    def invalidate(self, *views: View) -> None: ...


class StaleViewRegistry:
    """
    In-process ViewInvalidator that remembers which views went stale.

    The HTTP service exposes the set so clients can refetch; consume()
    clears it once read.
    """

    def __init__(self):
        self._stale: set[View] = set()

    def invalidate(self, *views: View) -> None:
        self._stale.update(views)
        logger.debug('views.invalidated', views=sorted(v.value for v in views))

    def is_stale(self, view: View) -> bool:
        return view in self._stale

    def consume(self, views: Iterable[View] | None = None) -> set[View]:
        """Return and clear the stale views (all of them when none are given)."""
        wanted = set(views) if views is not None else set(self._stale)
        consumed = self._stale & wanted
        self._stale -= consumed
        return consumed
