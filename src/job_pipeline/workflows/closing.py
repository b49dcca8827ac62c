"""
Closing board actions: contract sent, deal lost.
"""

from ..errors import ActionResult, ValidationError
from ..logging import get_logger, logging_context
from ..models.fields import JOBS
from ..models.stage import Stage
from ..repository import JobRepository
from ..utils import Clock, to_store_timestamp, utc_now
from ..views import View, ViewInvalidator

logger = get_logger(__name__)


class ClosingWorkflow:
    """Actions on deals in active engagement."""

    def __init__(
        self,
        repository: JobRepository,
        invalidator: ViewInvalidator,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.invalidator = invalidator
        self.clock = clock

    async def mark_contract_sent(self, job_id: str) -> ActionResult:
        """Stamp Contract Sent Date; the deal moves to the contract-sent column."""
        with logging_context(job_id=job_id):
            try:
                await self.repository.update_job_fields(
                    job_id, {JOBS.CONTRACT_SENT_DATE: to_store_timestamp(self.clock())}
                )
            except Exception as e:
                logger.error('closing.mark_contract_sent_failed', error=str(e))
                return ActionResult.from_exception(e, 'Failed to mark contract as sent')

            self.invalidator.invalidate(View.CLOSING)
            logger.info('closing.contract_sent')
            return ActionResult.ok()

    async def mark_lost(self, job_id: str, reason: str) -> ActionResult:
        """Close a deal as lost with a reason."""
        with logging_context(job_id=job_id):
            try:
                if not reason or not reason.strip():
                    raise ValidationError('Lost reason cannot be empty')
                await self.repository.update_job_stage(
                    job_id, Stage.CLOSED_LOST, {JOBS.LOST_REASON: reason.strip()}
                )
            except Exception as e:
                logger.error('closing.mark_lost_failed', error=str(e))
                return ActionResult.from_exception(e, 'Failed to mark deal as lost')

            self.invalidator.invalidate(View.CLOSING, View.PIPELINE)
            logger.info('closing.lost', reason=reason.strip())
            return ActionResult.ok()
