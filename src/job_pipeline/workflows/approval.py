"""
Approval and rejection of prototype briefs.

State machine per job:
    pending approval --approve--> (build service starts the build)
    pending approval --reject(reason)--> rejected (moved by the build service)
    prototype building --mark failed--> build failed (local write)

Approve and reject delegate the stage change to the build service. Failures
come back as ActionResult; a structured build-service failure keeps its
code so callers can branch on it (e.g. WRONG_STAGE) without reading the
message.
"""

import json
from typing import Any

from ..clients.build_client import BuildServiceClient
from ..errors import ActionResult, ValidationError
from ..logging import ActionTimer, get_logger, logging_context
from ..models.fields import JOBS
from ..models.stage import Stage
from ..repository import JobRepository
from ..utils import Clock, to_store_timestamp, utc_now
from ..views import View, ViewInvalidator

logger = get_logger(__name__)

UNKNOWN_USER = 'Unknown User'


def resolve_user_name(session_cookie: str | None) -> str:
    """
    Display name of the acting user from the session cookie.

    The cookie holds a JSON object with a "name" key. A missing cookie,
    malformed JSON or a nameless session gives UNKNOWN_USER; identity never
    blocks an action.
    """
    if not session_cookie:
        return UNKNOWN_USER
    try:
        session: Any = json.loads(session_cookie)
    except json.JSONDecodeError:
        return UNKNOWN_USER
    if not isinstance(session, dict):
        return UNKNOWN_USER
    name = session.get('name')
    return name if isinstance(name, str) and name else UNKNOWN_USER


class ApprovalWorkflow:
    """
    Human approval gate in front of prototype builds.

    Usage:
        workflow = ApprovalWorkflow(build_client, repository, invalidator)
        result = await workflow.approve_brief('rec123', session_cookie)
    """

    def __init__(
        self,
        build_client: BuildServiceClient,
        repository: JobRepository,
        invalidator: ViewInvalidator,
        clock: Clock = utc_now,
    ):
        self.build_client = build_client
        self.repository = repository
        self.invalidator = invalidator
        self.clock = clock

    async def approve_brief(
        self,
        job_id: str,
        session_cookie: str | None = None,
        notes: str | None = None,
    ) -> ActionResult:
        """
        Approve a brief and start its build.

        Triggers the build, marks the approve and building views stale, then
        stamps Approved Date. A failed stamp is reported as a failure, but
        the views are already invalidated because the build is running.
        """
        user_name = resolve_user_name(session_cookie)
        timer = ActionTimer()

        with logging_context(job_id=job_id, user_name=user_name):
            try:
                with timer.step('trigger_build'):
                    await self.build_client.trigger_build(job_id, user_name, notes)
            except Exception as e:
                result = ActionResult.from_exception(e, 'Failed to approve brief')
                logger.error(
                    'approval.approve_failed',
                    error=result.error,
                    code=result.code,
                    error_type=type(e).__name__,
                )
                return result

            # The build service has moved the job; the queues are stale even
            # if the stamp below fails.
            self.invalidator.invalidate(View.APPROVE, View.BUILDING)

            try:
                with timer.step('stamp_approved_date'):
                    await self.repository.update_job_fields(
                        job_id, {JOBS.APPROVED_DATE: to_store_timestamp(self.clock())}
                    )
            except Exception as e:
                logger.error(
                    'approval.stamp_failed',
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return ActionResult.from_exception(
                    e, 'Build started but Approved Date was not saved'
                )

            logger.info('approval.approved', **timer.summary())
            return ActionResult.ok()

    async def reject_brief(
        self,
        job_id: str,
        reason: str,
        session_cookie: str | None = None,
        notes: str | None = None,
    ) -> ActionResult:
        """Reject a brief. The reason is mandatory."""
        user_name = resolve_user_name(session_cookie)

        with logging_context(job_id=job_id, user_name=user_name):
            try:
                if not reason or not reason.strip():
                    raise ValidationError('Rejection reason cannot be empty')
                await self.build_client.reject_build(
                    job_id, reason.strip(), user_name, notes
                )
            except Exception as e:
                result = ActionResult.from_exception(e, 'Failed to reject brief')
                logger.error(
                    'approval.reject_failed',
                    error=result.error,
                    code=result.code,
                    error_type=type(e).__name__,
                )
                return result

            self.invalidator.invalidate(View.APPROVE, View.BUILDING)
            logger.info('approval.rejected', reason=reason.strip())
            return ActionResult.ok()

    async def mark_build_failed(self, job_id: str) -> ActionResult:
        """Move a building job to build failed. No external call."""
        with logging_context(job_id=job_id):
            try:
                await self.repository.update_job_stage(job_id, Stage.BUILD_FAILED)
            except Exception as e:
                logger.error('approval.mark_build_failed_failed', error=str(e))
                return ActionResult.from_exception(e, 'Failed to mark build as failed')

            self.invalidator.invalidate(View.BUILDING, View.PIPELINE)
            logger.info('approval.build_failed_marked')
            return ActionResult.ok()
