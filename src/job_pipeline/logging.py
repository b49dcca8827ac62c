"""
Structured logging for the Job Pipeline ops core.

Events are dotted names ('follow_up.advanced') with keyword fields, rendered
as JSON in production and as colored console lines in development. The job
being acted on and the acting user are bound once per action with
logging_context() and then appear on every event logged inside it.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Generator

import structlog
from structlog.contextvars import bound_contextvars, get_contextvars, merge_contextvars
from structlog.types import Processor

from .config import config


def _bound(key: str) -> str | None:
    return get_contextvars().get(key)


def get_trace_id() -> str | None:
    return _bound('trace_id')


def get_job_id() -> str | None:
    """Record ID of the job the current action works on."""
    return _bound('job_id')


def get_user_name() -> str | None:
    """Display name of the user behind the current action."""
    return _bound('user_name')


@contextmanager
def logging_context(
    trace_id: str | None = None,
    job_id: str | None = None,
    user_name: str | None = None,
) -> Generator[None, None, None]:
    """
    Bind action context for every event logged inside the block.

    Only the values given are bound; on exit the previous values (or their
    absence) are restored, so contexts nest.

    Usage:
        with logging_context(job_id='rec123', user_name='Steve'):
            logger.info('approval.approved')
    """
    values = {'trace_id': trace_id, 'job_id': job_id, 'user_name': user_name}
    with bound_contextvars(**{k: v for k, v in values.items() if v is not None}):
        yield


def _renderer(json_output: bool) -> list[Processor]:
    if json_output:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(json_output: bool = False, log_level: str | None = None) -> None:
    """
    Configure structlog for the process.

    Args:
        json_output: JSON lines for production, console output otherwise
        log_level: Minimum level name (defaults to config.LOG_LEVEL)
    """
    level = getattr(logging, (log_level or config.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(format='%(message)s', stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            # Explicit event fields win over bound context
            merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=True),
            *_renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class ActionTimer:
    """
    Per-step durations of one workflow action, in milliseconds.

    Usage:
        timer = ActionTimer()
        with timer.step('read_stage'):
            ...
        logger.info('follow_up.advanced', **timer.summary())
    """

    def __init__(self):
        self.steps: dict[str, float] = {}
        self.start_time: float = time.perf_counter()

    @contextmanager
    def step(self, name: str) -> Generator[None, None, None]:
        started = time.perf_counter()
        try:
            yield
        finally:
            self.steps[name] = (time.perf_counter() - started) * 1000

    @property
    def total_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        return {
            'total_ms': round(self.total_ms, 2),
            'steps': {k: round(v, 2) for k, v in self.steps.items()},
        }


# Development output until the service configures JSON logging
configure_logging(json_output=False)
