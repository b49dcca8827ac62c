"""
LLM prompts for the Job Pipeline ops core.
"""

from .follow_up import (
    FOLLOW_UP_SYSTEM_PROMPT,
    MESSAGE_STAGES,
    FollowUpPrompt,
    build_prompt_for_stage,
    fill_placeholders,
)

__all__ = [
    'FOLLOW_UP_SYSTEM_PROMPT',
    'MESSAGE_STAGES',
    'FollowUpPrompt',
    'build_prompt_for_stage',
    'fill_placeholders',
]
