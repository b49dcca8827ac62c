"""
Follow-up advancement and the other inbox actions.

Advancing a job walks the touchpoint sequence:
    initial message sent -> touchpoint 1 -> touchpoint 2 -> touchpoint 3 -> closed lost

Every advancement starts from a fresh read of the job's stage, and writes
the new stage together with its due date in a single update call, so a job
is never left advanced with a stale Next Action Date. Concurrent advances of
the same job are not coordinated (last write wins).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ..clients.openai_client import TextGenerationClient
from ..errors import ActionResult
from ..logging import ActionTimer, get_logger, logging_context
from ..models.fields import JOBS
from ..models.job import HOT_LEAD_TYPES, ResponseType
from ..models.stage import Stage, is_terminal, next_stage
from ..prompts.follow_up import MESSAGE_STAGES, build_prompt_for_stage, fill_placeholders
from ..repository import JobRepository
from ..utils import Clock, to_store_timestamp, utc_now
from ..views import View, ViewInvalidator

logger = get_logger(__name__)

# Time between one touchpoint and the next
FOLLOW_UP_INTERVAL = timedelta(hours=24)

NO_RESPONSE_REASON = 'No response'


@dataclass(frozen=True)
class Advancement:
    """What a follow-up advancement wrote."""

    job_id: str
    previous_stage: Stage
    next_stage: Stage
    next_action_date: datetime | None

    def to_dict(self) -> dict[str, Any]:
        return {
            'job_id': self.job_id,
            'previous_stage': self.previous_stage.value,
            'next_stage': self.next_stage.value,
            'next_action_date': (
                self.next_action_date.isoformat() if self.next_action_date else None
            ),
        }


class FollowUpWorkflow:
    """
    Inbox actions: advance follow-ups, log responses, close out.

    Usage:
        workflow = FollowUpWorkflow(repository, invalidator)
        advancement = await workflow.mark_followed_up('rec123')
    """

    def __init__(
        self,
        repository: JobRepository,
        invalidator: ViewInvalidator,
        text_client: TextGenerationClient | None = None,
        neetocal_link: str = '',
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.invalidator = invalidator
        self.text_client = text_client
        self.neetocal_link = neetocal_link
        self.clock = clock

    async def mark_followed_up(self, job_id: str) -> Advancement:
        """
        Advance a job to its next touchpoint.

        Closing as lost writes the stage and Last Follow Up Date only. Any
        other successor also gets Next Action Date = now + 24h, in the same
        update call.

        Raises:
            NoProgressionDefinedError: If the current stage has no successor
                (nothing is written)
            AirtableError: If the read or the write fails
        """
        timer = ActionTimer()
        with logging_context(job_id=job_id):
            with timer.step('read_stage'):
                job = await self.repository.get_job(job_id)

            successor = next_stage(job.stage, job.stage_label)
            now = self.clock()

            fields: dict[str, Any] = {JOBS.LAST_FOLLOW_UP_DATE: to_store_timestamp(now)}
            next_action_date = None
            if not is_terminal(successor):
                next_action_date = now + FOLLOW_UP_INTERVAL
                fields[JOBS.NEXT_ACTION_DATE] = to_store_timestamp(next_action_date)

            with timer.step('write_stage'):
                await self.repository.update_job_stage(job_id, successor, fields)

            self.invalidator.invalidate(View.INBOX, View.PIPELINE)
            logger.info(
                'follow_up.advanced',
                previous_stage=job.stage.value if job.stage else None,
                next_stage=successor.value,
                **timer.summary(),
            )

            # job.stage is set: next_stage() raises for None
            return Advancement(
                job_id=job_id,
                previous_stage=job.stage,  # type: ignore[arg-type]
                next_stage=successor,
                next_action_date=next_action_date,
            )

    async def log_response(
        self,
        job_id: str,
        response_type: ResponseType,
    ) -> Stage | None:
        """
        Record a client response.

        Stamps Response Date and Response Type. A hot-lead response
        (shortlist, interview, hire) also moves the job to light engagement.

        Returns:
            The new stage, or None when the stage was left alone
        """
        fields = {
            JOBS.RESPONSE_DATE: to_store_timestamp(self.clock()),
            JOBS.RESPONSE_TYPE: response_type.value,
        }
        with logging_context(job_id=job_id):
            if response_type in HOT_LEAD_TYPES:
                await self.repository.update_job_stage(job_id, Stage.LIGHT_ENGAGEMENT, fields)
                self.invalidator.invalidate(View.INBOX, View.CLOSING, View.PIPELINE)
                logger.info('follow_up.response_logged', response_type=response_type.value, hot=True)
                return Stage.LIGHT_ENGAGEMENT

            await self.repository.update_job_fields(job_id, fields)
            self.invalidator.invalidate(View.INBOX)
            logger.info('follow_up.response_logged', response_type=response_type.value, hot=False)
            return None

    async def close_no_response(self, job_id: str) -> None:
        """Close a job as lost because the client never answered."""
        with logging_context(job_id=job_id):
            await self.repository.update_job_stage(
                job_id, Stage.CLOSED_LOST, {JOBS.LOST_REASON: NO_RESPONSE_REASON}
            )
            self.invalidator.invalidate(View.INBOX, View.PIPELINE)
            logger.info('follow_up.closed_no_response')

    async def mark_call_done(self, job_id: str) -> None:
        """Stamp Call Completed Date."""
        with logging_context(job_id=job_id):
            await self.repository.update_job_fields(
                job_id, {JOBS.CALL_COMPLETED_DATE: to_store_timestamp(self.clock())}
            )
            self.invalidator.invalidate(View.INBOX, View.CLOSING)
            logger.info('follow_up.call_done')

    async def mark_contract_signed(self, job_id: str, deal_value: float) -> None:
        """
        Close a job as won.

        Raises:
            ValueError: If deal_value is negative
        """
        if deal_value < 0:
            raise ValueError('Deal value cannot be negative')
        with logging_context(job_id=job_id):
            await self.repository.update_job_stage(
                job_id,
                Stage.CLOSED_WON,
                {
                    JOBS.CLOSE_DATE: to_store_timestamp(self.clock()),
                    JOBS.DEAL_VALUE: deal_value,
                },
            )
            self.invalidator.invalidate(View.INBOX, View.CLOSING, View.PIPELINE)
            logger.info('follow_up.contract_signed', deal_value=deal_value)

    async def generate_follow_up_message(
        self,
        job_id: str,
        stage: Stage | str | None,
    ) -> ActionResult:
        """
        Draft the follow-up message due at a stage.

        Only initial message sent, touchpoint 1 and touchpoint 2 get a
        message. The generated text has its URL placeholders replaced with
        the job's Loom URL and the booking link.

        Returns:
            ActionResult with data['message'] on success
        """
        resolved = Stage.parse(stage)
        if resolved not in MESSAGE_STAGES:
            shown = stage.label if isinstance(stage, Stage) else (stage or '')
            return ActionResult(success=False, error=f'No AI message needed for stage: {shown}')
        if self.text_client is None:
            return ActionResult(success=False, error='Text generation is not configured')

        with logging_context(job_id=job_id):
            try:
                job = await self.repository.get_job(job_id)
                prompt = build_prompt_for_stage(job, resolved)
                raw = await self.text_client.generate_text(prompt.user, system=prompt.system)
            except Exception as e:
                logger.error(
                    'follow_up.message_generation_failed',
                    stage=resolved.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return ActionResult.from_exception(e, 'Failed to generate message')

            message = fill_placeholders(raw, job.loom_url, self.neetocal_link)
            logger.info('follow_up.message_generated', stage=resolved.value, length=len(message))
            return ActionResult.ok(message=message)
