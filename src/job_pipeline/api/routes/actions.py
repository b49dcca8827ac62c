"""POST /jobs/{job_id}/* — user actions on a single job."""

from typing import Any

import httpx
import structlog
from fastapi import APIRouter, Cookie, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from job_pipeline.errors import (
    ActionResult,
    ClientError,
    NoProgressionDefinedError,
)
from job_pipeline.models.job import ResponseType
from job_pipeline.workflows import (
    ApprovalWorkflow,
    ClosingWorkflow,
    FollowUpWorkflow,
    ReadyToSendWorkflow,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/jobs")


# =============================================================================
# Request Bodies
# =============================================================================


class ApproveRequest(BaseModel):
    notes: str | None = None


class RejectRequest(BaseModel):
    reason: str
    notes: str | None = None


class ResponseRequest(BaseModel):
    response_type: ResponseType


class ContractSignedRequest(BaseModel):
    deal_value: float = Field(..., ge=0)


class LostRequest(BaseModel):
    reason: str


class LoomRequest(BaseModel):
    url: str


class FollowUpMessageRequest(BaseModel):
    stage: str = Field(..., description="Logical stage token or store label")


# =============================================================================
# Helpers
# =============================================================================


def _approval(request: Request) -> ApprovalWorkflow:
    state = request.app.state
    return ApprovalWorkflow(
        build_client=state.build_client,
        repository=state.repository,
        invalidator=state.views,
        clock=state.clock,
    )


def _follow_up(request: Request) -> FollowUpWorkflow:
    state = request.app.state
    return FollowUpWorkflow(
        repository=state.repository,
        invalidator=state.views,
        text_client=state.text_client,
        neetocal_link=state.neetocal_link,
        clock=state.clock,
    )


def _closing(request: Request) -> ClosingWorkflow:
    state = request.app.state
    return ClosingWorkflow(repository=state.repository, invalidator=state.views, clock=state.clock)


def _ready_to_send(request: Request) -> ReadyToSendWorkflow:
    state = request.app.state
    return ReadyToSendWorkflow(
        repository=state.repository, invalidator=state.views, clock=state.clock
    )


def _respond(result: ActionResult) -> Any:
    if result.success:
        return result.to_dict()
    return JSONResponse(status_code=400, content=result.to_dict())


async def _run(action: str, job_id: str, call) -> Any:
    """Run an action that raises on failure and map the error to a result."""
    try:
        data = await call()
    except NoProgressionDefinedError as e:
        return JSONResponse(
            status_code=409,
            content=ActionResult.from_exception(e, f"Failed to {action}").to_dict(),
        )
    except (ClientError, httpx.HTTPError) as e:
        logger.error(
            "actions.failed",
            action=action,
            job_id=job_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        return JSONResponse(
            status_code=502,
            content=ActionResult.from_exception(e, f"Failed to {action}").to_dict(),
        )
    return ActionResult.ok(**(data or {})).to_dict()


# =============================================================================
# Approval
# =============================================================================


@router.post("/{job_id}/approve")
async def approve(
    job_id: str,
    body: ApproveRequest,
    request: Request,
    session: str | None = Cookie(default=None),
):
    return _respond(await _approval(request).approve_brief(job_id, session, body.notes))


@router.post("/{job_id}/reject")
async def reject(
    job_id: str,
    body: RejectRequest,
    request: Request,
    session: str | None = Cookie(default=None),
):
    return _respond(
        await _approval(request).reject_brief(job_id, body.reason, session, body.notes)
    )


@router.post("/{job_id}/build-failed")
async def build_failed(job_id: str, request: Request):
    return _respond(await _approval(request).mark_build_failed(job_id))


# =============================================================================
# Send Queue
# =============================================================================


@router.post("/{job_id}/loom")
async def save_loom(job_id: str, body: LoomRequest, request: Request):
    return _respond(await _ready_to_send(request).save_loom_url(job_id, body.url))


@router.post("/{job_id}/applied")
async def applied(
    job_id: str,
    request: Request,
    session: str | None = Cookie(default=None),
):
    return _respond(await _ready_to_send(request).mark_applied(job_id, session))


# =============================================================================
# Inbox
# =============================================================================


@router.post("/{job_id}/follow-up")
async def follow_up(job_id: str, request: Request):
    """Advance the job to its next touchpoint."""
    workflow = _follow_up(request)

    async def call():
        advancement = await workflow.mark_followed_up(job_id)
        return advancement.to_dict()

    return await _run("mark as followed up", job_id, call)


@router.post("/{job_id}/response")
async def log_response(job_id: str, body: ResponseRequest, request: Request):
    workflow = _follow_up(request)

    async def call():
        stage = await workflow.log_response(job_id, body.response_type)
        return {"stage": stage.value if stage else None}

    return await _run("log response", job_id, call)


@router.post("/{job_id}/close-no-response")
async def close_no_response(job_id: str, request: Request):
    return await _run(
        "close as no response", job_id, lambda: _follow_up(request).close_no_response(job_id)
    )


@router.post("/{job_id}/call-done")
async def call_done(job_id: str, request: Request):
    return await _run(
        "mark call done", job_id, lambda: _follow_up(request).mark_call_done(job_id)
    )


@router.post("/{job_id}/contract-signed")
async def contract_signed(job_id: str, body: ContractSignedRequest, request: Request):
    return await _run(
        "mark contract signed",
        job_id,
        lambda: _follow_up(request).mark_contract_signed(job_id, body.deal_value),
    )


@router.post("/{job_id}/follow-up-message")
async def follow_up_message(job_id: str, body: FollowUpMessageRequest, request: Request):
    return _respond(await _follow_up(request).generate_follow_up_message(job_id, body.stage))


# =============================================================================
# Closing
# =============================================================================


@router.post("/{job_id}/contract-sent")
async def contract_sent(job_id: str, request: Request):
    return _respond(await _closing(request).mark_contract_sent(job_id))


@router.post("/{job_id}/lost")
async def lost(job_id: str, body: LostRequest, request: Request):
    return _respond(await _closing(request).mark_lost(job_id, body.reason))
