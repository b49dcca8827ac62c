"""
Follow-up message prompts, one per touchpoint.

Message 2 (initial message sent): re-surface the Loom with a different hook.
Message 3 (touchpoint 1): bridge the prototype to the full project, offer a call.
Message 4 (touchpoint 2): offer to adjust the prototype before closing.

Touchpoint 3 gets no message; the job is closed as lost instead.

The model never sees real URLs. It writes {{LOOM_URL}} and {{NEETOCAL_LINK}}
placeholders, which fill_placeholders() replaces afterwards.
"""

from dataclasses import dataclass

from ..errors import PromptError
from ..models.job import Job
from ..models.stage import Stage

LOOM_URL_PLACEHOLDER = '{{LOOM_URL}}'
NEETOCAL_LINK_PLACEHOLDER = '{{NEETOCAL_LINK}}'

# Stages with a follow-up message
MESSAGE_STAGES: tuple[Stage, ...] = (
    Stage.INITIAL_MESSAGE_SENT,
    Stage.TOUCHPOINT_1,
    Stage.TOUCHPOINT_2,
)


@dataclass(frozen=True)
class FollowUpPrompt:
    system: str
    user: str


# =============================================================================
# System Prompt
# =============================================================================


FOLLOW_UP_SYSTEM_PROMPT = """You write short Upwork follow-up messages for a freelance developer who built the client a working prototype before applying.

Rules:
- Use a casual, friendly tone. No corporate speak.
- Do NOT use phrases like "just following up", "circling back", "touching base", or "I wanted to reach out".
- Do NOT include a subject line. Just the message body.
- Do NOT include any greeting like "Hi [name]". Start directly with the message.
- Never write a real URL. Write {{LOOM_URL}} where the Loom video link goes and {{NEETOCAL_LINK}} where the booking link goes.
- Output ONLY the message text, nothing else."""


# =============================================================================
# Per-Stage User Prompts
# =============================================================================


_JOB_CONTEXT_TEMPLATE = """Job title: {title}
Job description: {description}
{loom_line}
{client_line}"""

_STAGE_TEMPLATES: dict[Stage, str] = {
    Stage.INITIAL_MESSAGE_SENT: """Write Message 2 in a 3-message sequence.

Context:
{job_context}

Goal: Re-surface the Loom video with a different hook than the original message. The client hasn't responded to the first message yet.

- Maximum 2-3 lines. Be extremely concise.
- Reference the Loom video as {{{{LOOM_URL}}}} if one is available.""",
    Stage.TOUCHPOINT_1: """Write Message 3 in a 3-message sequence.

Context:
{job_context}

Goal: Bridge the prototype to a full project conversation and offer a quick call.

- Maximum 3-4 lines. Be concise.
- Mention the prototype or Loom briefly, then pivot to discussing the full project.
- Include {{{{NEETOCAL_LINK}}}} naturally so the client can book a call.""",
    Stage.TOUCHPOINT_2: """Write Message 4, the final follow-up before closing.

Context:
{job_context}

Goal: Offer to adjust the prototype based on their needs. This is a soft final attempt before closing the lead.

- Maximum 2-3 lines. Be extremely concise.
- Offer to tweak or adjust the prototype to better fit their needs.
- Keep it low-pressure. This is the last message before closing as no-response.""",
}


def _job_context(job: Job) -> str:
    return _JOB_CONTEXT_TEMPLATE.format(
        title=job.title,
        description=job.description,
        loom_line=(
            f'Loom video: {LOOM_URL_PLACEHOLDER}' if job.loom_url else 'No Loom video available.'
        ),
        client_line=f'Client name: {job.client}' if job.client else '',
    ).strip()


def build_prompt_for_stage(job: Job, stage: Stage | None) -> FollowUpPrompt:
    """
    Build the prompt for the follow-up message due at a stage.

    Args:
        job: The job being followed up
        stage: The job's current stage

    Returns:
        System and user prompt

    Raises:
        PromptError: For touchpoint 3 and for stages outside the follow-up sequence
    """
    if stage == Stage.TOUCHPOINT_3:
        raise PromptError(
            'Touchpoint 3 does not need an AI-generated message, just close as lost.'
        )
    template = _STAGE_TEMPLATES.get(stage) if stage is not None else None
    if template is None:
        shown = stage.label if stage is not None else ''
        raise PromptError(f'No follow-up prompt defined for stage: {shown}')

    return FollowUpPrompt(
        system=FOLLOW_UP_SYSTEM_PROMPT,
        user=template.format(job_context=_job_context(job)),
    )


def fill_placeholders(message: str, loom_url: str | None, neetocal_link: str) -> str:
    """Swap the URL placeholders in a generated message for the real links."""
    return message.replace(LOOM_URL_PLACEHOLDER, loom_url or '').replace(
        NEETOCAL_LINK_PLACEHOLDER, neetocal_link
    )
