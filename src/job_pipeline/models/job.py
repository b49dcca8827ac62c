"""
Job entity and related value types.

A Job is the unit of work flowing through the pipeline, from scraped
listing to closed deal. Every field besides identity is optional because
the store schema evolves independently of this code: absent fields stay
None (never a fabricated default), so "no budget recorded" stays distinct
from "zero budget".
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .stage import Stage


class ResponseType(str, Enum):
    """Closed set of client responses logged against a job."""

    MESSAGE = 'Message'
    SHORTLIST = 'Shortlist'
    INTERVIEW = 'Interview'
    HIRE = 'Hire'
    DECLINE = 'Decline'
    HIRED_OTHER = 'Hired Other'

    @classmethod
    def from_value(cls, value: str | None) -> 'ResponseType | None':
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


HOT_LEAD_TYPES: tuple[ResponseType, ...] = (
    ResponseType.SHORTLIST,
    ResponseType.INTERVIEW,
    ResponseType.HIRE,
)


class BriefData(BaseModel):
    """Parts of a prototype brief the dashboards care about."""

    routes: list[Any] = Field(default_factory=list)
    template: str = Field(default='unknown', description='dashboard, web_app or unknown')
    unique_interactions: str = ''


class Job(BaseModel):
    """
    Normalised Jobs Pipeline record.

    `stage` is None when the store value is empty or not in the stage
    vocabulary; such jobs are excluded from every classification bucket.
    `stage_label` keeps the raw store value for display and error messages.
    """

    # Identity
    id: str = Field(..., description='Store record ID')
    job_id: str = Field(..., description='Business identifier, falls back to id')

    # Classification
    stage: Stage | None = None
    stage_label: str = ''
    response_type: ResponseType | None = None

    # Content
    title: str = 'Untitled Job'
    description: str = ''
    client: str | None = None
    skills: str | None = None
    brief: str | None = None
    buildable: bool | None = None
    buildable_reasoning: str | None = None
    template: str = 'unknown'
    routes: list[Any] | None = None
    unique_interactions: str | None = None

    # Artifacts
    job_url: str | None = None
    prototype_url: str | None = None
    loom_url: str | None = None
    cover_letter: str | None = None
    ai_loom_outline: str | None = None

    # Commercial
    budget_amount: float | None = Field(default=None, ge=0)
    budget_type: str | None = None
    deal_value: float | None = Field(default=None, ge=0)
    lost_reason: str | None = None

    # Timestamps
    scraped_at: datetime | None = None
    applied_at: datetime | None = None
    approved_date: datetime | None = None
    deployed_date: datetime | None = None
    loom_recorded_date: datetime | None = None
    response_date: datetime | None = None
    next_action_date: datetime | None = None
    last_follow_up_date: datetime | None = None
    call_completed_date: datetime | None = None
    contract_sent_date: datetime | None = None
    close_date: datetime | None = None

    @field_validator(
        'scraped_at',
        'applied_at',
        'approved_date',
        'deployed_date',
        'loom_recorded_date',
        'response_date',
        'next_action_date',
        'last_follow_up_date',
        'call_completed_date',
        'contract_sent_date',
        'close_date',
    )
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        """Naive timestamps are taken as UTC, same as the record mapper."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_hot_lead(self) -> bool:
        return self.response_type in HOT_LEAD_TYPES

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict for view payloads; None values are dropped."""
        data = self.model_dump(mode='json')
        return {k: v for k, v in data.items() if v is not None}


class PipelineCounts(BaseModel):
    """Funnel tally, one counter per stage group."""

    new: int = 0
    pending_approval: int = 0
    approved: int = 0
    building: int = 0
    deployed: int = 0
    applied: int = 0
    follow_ups: int = 0
    engaging: int = 0
    closed_won: int = 0
    closed_lost: int = 0
    build_failed: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return sum(self.model_dump().values())


class DailyMetrics(BaseModel):
    """How many jobs crossed each milestone today."""

    jobs_detected: int = 0
    jobs_approved: int = 0
    prototypes_built: int = 0
    applications_sent: int = 0
    responses_received: int = 0
    calls_completed: int = 0
    contracts_signed: int = 0
    date: str = Field(..., description='ISO day the counters cover (YYYY-MM-DD)')
