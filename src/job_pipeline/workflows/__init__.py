"""
User-facing actions over the Jobs Pipeline.
"""

from .approval import UNKNOWN_USER, ApprovalWorkflow, resolve_user_name
from .closing import ClosingWorkflow
from .follow_up import FOLLOW_UP_INTERVAL, Advancement, FollowUpWorkflow
from .ready_to_send import ReadyToSendWorkflow

__all__ = [
    # Approval
    'ApprovalWorkflow',
    'resolve_user_name',
    'UNKNOWN_USER',
    # Follow-ups
    'FollowUpWorkflow',
    'Advancement',
    'FOLLOW_UP_INTERVAL',
    # Closing
    'ClosingWorkflow',
    # Send queue
    'ReadyToSendWorkflow',
]
