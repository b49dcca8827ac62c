"""
Dashboard grouping functions.

Each function partitions a snapshot of jobs into the buckets of one view.
All of them are pure and single-pass, take "now" explicitly where time
matters, and are total: jobs with an unrecognised stage or response type
are left out of every bucket rather than raising.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta
from typing import Any, Iterable

from ..models.job import Job, PipelineCounts, ResponseType
from ..models.stage import Stage

# Closed-won deals stay on the closing board for this long after closing.
WON_WINDOW = timedelta(days=7)


@dataclass
class _Columns:
    """Shared helpers for column dataclasses whose fields are all job lists."""

    @property
    def total(self) -> int:
        return sum(len(getattr(self, f.name)) for f in fields(self))

    def ids(self) -> list[str]:
        return [job.id for f in fields(self) for job in getattr(self, f.name)]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            f.name: [job.to_dict() for job in getattr(self, f.name)]
            for f in fields(self)
        }


# =============================================================================
# Hot Leads
# =============================================================================


@dataclass
class HotLeadColumns(_Columns):
    shortlist: list[Job] = field(default_factory=list)
    interview: list[Job] = field(default_factory=list)
    hire: list[Job] = field(default_factory=list)


def group_hot_leads(jobs: Iterable[Job]) -> HotLeadColumns:
    """Partition jobs by hot-lead response type; other responses are dropped."""
    columns = HotLeadColumns()
    buckets = {
        ResponseType.SHORTLIST: columns.shortlist,
        ResponseType.INTERVIEW: columns.interview,
        ResponseType.HIRE: columns.hire,
    }
    for job in jobs:
        bucket = buckets.get(job.response_type) if job.response_type else None
        if bucket is not None:
            bucket.append(job)
    return columns


# =============================================================================
# Follow-ups
# =============================================================================


@dataclass
class FollowUpColumns(_Columns):
    follow_up_1: list[Job] = field(default_factory=list)
    follow_up_2: list[Job] = field(default_factory=list)
    follow_up_3: list[Job] = field(default_factory=list)
    # No stage routes here while touchpoint 3 is the last follow-up message.
    close_out: list[Job] = field(default_factory=list)


@dataclass
class FollowUpBoard:
    overdue: FollowUpColumns = field(default_factory=FollowUpColumns)
    upcoming: FollowUpColumns = field(default_factory=FollowUpColumns)

    @property
    def total(self) -> int:
        return self.overdue.total + self.upcoming.total

    def to_dict(self) -> dict[str, Any]:
        return {'overdue': self.overdue.to_dict(), 'upcoming': self.upcoming.to_dict()}


_FOLLOW_UP_COLUMNS: dict[Stage, str] = {
    Stage.TOUCHPOINT_1: 'follow_up_1',
    Stage.TOUCHPOINT_2: 'follow_up_2',
    Stage.TOUCHPOINT_3: 'follow_up_3',
}


def is_due(job: Job, now: datetime) -> bool:
    """A job with no next action date is always due."""
    return job.next_action_date is None or job.next_action_date <= now


def split_by_due(jobs: Iterable[Job], now: datetime) -> tuple[list[Job], list[Job]]:
    """Split jobs into (overdue, upcoming) by next action date."""
    overdue: list[Job] = []
    upcoming: list[Job] = []
    for job in jobs:
        (overdue if is_due(job, now) else upcoming).append(job)
    return overdue, upcoming


def group_follow_ups(jobs: Iterable[Job], now: datetime) -> FollowUpBoard:
    """
    Two-level partition: overdue/upcoming, then touchpoint column.

    Stages other than the three touchpoints are dropped.
    """
    board = FollowUpBoard()
    for job in jobs:
        column = _FOLLOW_UP_COLUMNS.get(job.stage) if job.stage else None
        if column is None:
            continue
        half = board.overdue if is_due(job, now) else board.upcoming
        getattr(half, column).append(job)
    return board


# =============================================================================
# Closing Board
# =============================================================================


@dataclass
class DealColumns(_Columns):
    engaged: list[Job] = field(default_factory=list)
    call_done: list[Job] = field(default_factory=list)
    contract_sent: list[Job] = field(default_factory=list)
    won: list[Job] = field(default_factory=list)


def group_deals_by_status(jobs: Iterable[Job], now: datetime) -> DealColumns:
    """
    Place each deal in one closing-board column.

    Precedence, first match wins:
    1. closed won and closed within WON_WINDOW -> won (older wins are dropped)
    2. contract sent date set -> contract_sent
    3. call completed date set -> call_done
    4. otherwise -> engaged

    Contract-sent outranks call-done regardless of which date is later.
    """
    columns = DealColumns()
    won_cutoff = now - WON_WINDOW

    for job in jobs:
        if job.stage is None:
            continue
        if job.stage == Stage.CLOSED_WON:
            if job.close_date is not None and job.close_date >= won_cutoff:
                columns.won.append(job)
            continue
        if job.contract_sent_date is not None:
            columns.contract_sent.append(job)
        elif job.call_completed_date is not None:
            columns.call_done.append(job)
        else:
            columns.engaged.append(job)

    return columns


# =============================================================================
# Funnel Counts
# =============================================================================


_FUNNEL_COUNTERS: dict[Stage, str] = {
    Stage.NEW: 'new',
    Stage.PENDING_APPROVAL: 'pending_approval',
    Stage.APPROVED: 'approved',
    Stage.PROTOTYPE_BUILDING: 'building',
    Stage.DEPLOYED: 'deployed',
    Stage.PROTOTYPE_BUILT: 'deployed',
    Stage.SEND_LOOM: 'deployed',
    Stage.INITIAL_MESSAGE_SENT: 'applied',
    Stage.TOUCHPOINT_1: 'follow_ups',
    Stage.TOUCHPOINT_2: 'follow_ups',
    Stage.TOUCHPOINT_3: 'follow_ups',
    Stage.LIGHT_ENGAGEMENT: 'engaging',
    Stage.ENGAGEMENT_WITH_PROTOTYPE: 'engaging',
    Stage.CLOSED_WON: 'closed_won',
    Stage.CLOSED_LOST: 'closed_lost',
    Stage.BUILD_FAILED: 'build_failed',
    Stage.REJECTED: 'rejected',
}


def count_pipeline_stages(stages: Iterable[Stage | None]) -> PipelineCounts:
    """Tally stages into funnel counters; None (unrecognised) is not counted."""
    tally = {name: 0 for name in PipelineCounts.model_fields}
    for stage in stages:
        counter = _FUNNEL_COUNTERS.get(stage) if stage else None
        if counter is not None:
            tally[counter] += 1
    return PipelineCounts(**tally)


def count_jobs_by_stage(jobs: Iterable[Job]) -> PipelineCounts:
    return count_pipeline_stages(job.stage for job in jobs)
