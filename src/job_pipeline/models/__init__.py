"""Data models for the Job Pipeline ops core."""

from .fields import BUILD, JOBS, TABLES
from .job import (
    HOT_LEAD_TYPES,
    BriefData,
    DailyMetrics,
    Job,
    PipelineCounts,
    ResponseType,
)
from .stage import (
    CLOSED_STAGES,
    ENGAGEMENT_STAGES,
    FOLLOW_UP_STAGES,
    READY_TO_SEND_STAGES,
    STAGE_LABELS,
    TOUCHPOINT_PROGRESSION,
    Stage,
    is_terminal,
    next_stage,
)

__all__ = [
    # Store schema
    'TABLES',
    'JOBS',
    'BUILD',
    # Entities
    'Job',
    'BriefData',
    'ResponseType',
    'HOT_LEAD_TYPES',
    'PipelineCounts',
    'DailyMetrics',
    # Stages
    'Stage',
    'STAGE_LABELS',
    'FOLLOW_UP_STAGES',
    'CLOSED_STAGES',
    'READY_TO_SEND_STAGES',
    'ENGAGEMENT_STAGES',
    'TOUCHPOINT_PROGRESSION',
    'next_stage',
    'is_terminal',
]
