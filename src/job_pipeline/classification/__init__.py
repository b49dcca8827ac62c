"""Pure classification functions behind the dashboard views."""

from .grouping import (
    WON_WINDOW,
    DealColumns,
    FollowUpBoard,
    FollowUpColumns,
    HotLeadColumns,
    count_jobs_by_stage,
    count_pipeline_stages,
    group_deals_by_status,
    group_follow_ups,
    group_hot_leads,
    is_due,
    split_by_due,
)
from .urgency import (
    DueTime,
    Urgency,
    due_time_for,
    format_due_label,
    format_due_time,
    get_urgency,
)

__all__ = [
    'WON_WINDOW',
    'HotLeadColumns',
    'FollowUpColumns',
    'FollowUpBoard',
    'DealColumns',
    'group_hot_leads',
    'group_follow_ups',
    'group_deals_by_status',
    'count_pipeline_stages',
    'count_jobs_by_stage',
    'is_due',
    'split_by_due',
    'Urgency',
    'DueTime',
    'get_urgency',
    'format_due_label',
    'format_due_time',
    'due_time_for',
]
