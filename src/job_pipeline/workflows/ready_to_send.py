"""
Send queue actions: attach the Loom walkthrough, mark the application sent.

Marking a job applied starts the touchpoint sequence at touchpoint 1 with
its first follow-up due 24 hours later.
"""

from ..errors import ActionResult, ValidationError
from ..logging import get_logger, logging_context
from ..models.fields import JOBS
from ..models.stage import Stage
from ..repository import JobRepository
from ..utils import Clock, to_store_timestamp, utc_now
from ..views import View, ViewInvalidator
from .approval import resolve_user_name
from .follow_up import FOLLOW_UP_INTERVAL

logger = get_logger(__name__)


class ReadyToSendWorkflow:
    """Actions on jobs whose prototype is ready to send."""

    def __init__(
        self,
        repository: JobRepository,
        invalidator: ViewInvalidator,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.invalidator = invalidator
        self.clock = clock

    async def save_loom_url(self, job_id: str, url: str) -> ActionResult:
        """Save a trimmed, non-empty Loom URL on the job."""
        with logging_context(job_id=job_id):
            try:
                if not url or not url.strip():
                    raise ValidationError('Loom URL cannot be empty')
                await self.repository.update_job_fields(job_id, {JOBS.LOOM_URL: url.strip()})
            except Exception as e:
                logger.error('ready_to_send.save_loom_failed', error=str(e))
                return ActionResult.from_exception(e, 'Failed to save Loom URL')

            self.invalidator.invalidate(View.READY_TO_SEND)
            logger.info('ready_to_send.loom_saved')
            return ActionResult.ok()

    async def mark_applied(
        self,
        job_id: str,
        session_cookie: str | None = None,
    ) -> ActionResult:
        """
        Mark a job as applied.

        Moves the stage to touchpoint 1 and stamps Applied At, Loom Recorded
        Date and Next Action Date (now + 24h) in one update call.
        """
        user_name = resolve_user_name(session_cookie)
        now = self.clock()
        next_action_date = now + FOLLOW_UP_INTERVAL

        with logging_context(job_id=job_id, user_name=user_name):
            try:
                await self.repository.update_job_stage(
                    job_id,
                    Stage.TOUCHPOINT_1,
                    {
                        JOBS.APPLIED_AT: to_store_timestamp(now),
                        JOBS.NEXT_ACTION_DATE: to_store_timestamp(next_action_date),
                        JOBS.LOOM_RECORDED_DATE: to_store_timestamp(now),
                    },
                )
            except Exception as e:
                logger.error('ready_to_send.mark_applied_failed', error=str(e))
                return ActionResult.from_exception(e, 'Failed to mark as applied')

            self.invalidator.invalidate(View.READY_TO_SEND, View.INBOX, View.PIPELINE)
            logger.info('ready_to_send.applied')
            return ActionResult.ok(next_action_date=next_action_date.isoformat())
