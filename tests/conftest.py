"""
Pytest configuration and shared fixtures.

All tests run offline: store, build service and OpenAI calls are mocked
(AsyncMock for collaborators, httpx.MockTransport for HTTP clients).

Key fixtures:
- now: Fixed "current instant" for time-dependent classification
- make_record: Factory for raw store records
- make_job: Factory for Job models
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

# Load environment variables
from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)

from job_pipeline.clients.airtable_client import Record
from job_pipeline.models.job import Job


@pytest.fixture
def now() -> datetime:
    """Fixed current instant: 2026-03-10 12:00 UTC."""
    return datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """Build a store record from field values."""

    def _make(record_id: str = 'rec001', **fields: Any) -> Record:
        return Record(id=record_id, fields=dict(fields))

    return _make


@pytest.fixture
def make_job() -> Callable[..., Job]:
    """Build a Job with sensible identity defaults."""
    counter = {'n': 0}

    def _make(**overrides: Any) -> Job:
        counter['n'] += 1
        record_id = overrides.pop('id', f'rec{counter["n"]:03d}')
        return Job(id=record_id, job_id=overrides.pop('job_id', record_id), **overrides)

    return _make
