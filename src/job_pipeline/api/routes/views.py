"""GET /views/* — dashboard snapshots, bucketed for display."""

import asyncio
from dataclasses import fields
from datetime import datetime
from typing import Any, Iterable

from fastapi import APIRouter, Request

from job_pipeline.classification import (
    due_time_for,
    group_deals_by_status,
    group_follow_ups,
    group_hot_leads,
    split_by_due,
)
from job_pipeline.config import config
from job_pipeline.models.job import Job
from job_pipeline.repository import JobRepository

router = APIRouter(prefix="/views")


def _repository(request: Request) -> JobRepository:
    return request.app.state.repository


def _now(request: Request) -> datetime:
    return request.app.state.clock()


def _job_payload(job: Job, now: datetime) -> dict[str, Any]:
    """Job fields plus its due label and store deep link."""
    data = job.to_dict()
    data["due"] = due_time_for(job.next_action_date, now).to_dict()
    record_url = config.record_url(job.id)
    if record_url:
        data["record_url"] = record_url
    return data


def _jobs_payload(jobs: Iterable[Job], now: datetime) -> list[dict[str, Any]]:
    return [_job_payload(job, now) for job in jobs]


def _columns_payload(columns: Any, now: datetime) -> dict[str, Any]:
    payload: dict[str, Any] = {
        f.name: _jobs_payload(getattr(columns, f.name), now) for f in fields(columns)
    }
    payload["total"] = columns.total
    return payload


@router.get("/approve")
async def approve_view(request: Request):
    """Buildable briefs awaiting approval, plus builds in progress."""
    repository = _repository(request)
    now = _now(request)
    to_approve, building = await asyncio.gather(
        repository.get_jobs_to_approve(),
        repository.get_jobs_building(),
    )
    return {
        "to_approve": _jobs_payload(to_approve, now),
        "building": _jobs_payload(building, now),
    }


@router.get("/ready-to-send")
async def ready_to_send_view(request: Request):
    jobs = await _repository(request).get_ready_to_send()
    return {"jobs": _jobs_payload(jobs, _now(request))}


@router.get("/hot-leads")
async def hot_leads_view(request: Request):
    jobs = await _repository(request).get_hot_leads()
    return _columns_payload(group_hot_leads(jobs), _now(request))


@router.get("/awaiting")
async def awaiting_view(request: Request):
    """Follow-up stage jobs without a response, split by due date."""
    now = _now(request)
    jobs = await _repository(request).get_awaiting_response()
    overdue, upcoming = split_by_due(jobs, now)
    return {
        "overdue": _jobs_payload(overdue, now),
        "upcoming": _jobs_payload(upcoming, now),
    }


@router.get("/follow-ups")
async def follow_ups_view(request: Request):
    now = _now(request)
    board = group_follow_ups(await _repository(request).get_follow_ups(), now)
    return {
        "overdue": _columns_payload(board.overdue, now),
        "upcoming": _columns_payload(board.upcoming, now),
        "total": board.total,
    }


@router.get("/inbox")
async def inbox_view(request: Request):
    """Hot leads, jobs awaiting a response, and follow-ups due today."""
    repository = _repository(request)
    now = _now(request)
    hot_leads, awaiting, due = await asyncio.gather(
        repository.get_hot_leads(),
        repository.get_awaiting_response(),
        repository.get_follow_ups_due(),
    )
    return {
        "hot_leads": _columns_payload(group_hot_leads(hot_leads), now),
        "awaiting_response": _jobs_payload(awaiting, now),
        "follow_ups_due": _jobs_payload(due, now),
    }


@router.get("/closing")
async def closing_view(request: Request):
    now = _now(request)
    deals = await _repository(request).get_active_deals()
    return _columns_payload(group_deals_by_status(deals, now), now)


@router.get("/pipeline")
async def pipeline_view(request: Request):
    counts = await _repository(request).get_pipeline_counts()
    return {**counts.model_dump(), "total": counts.total}


@router.get("/pulse")
async def pulse_view(request: Request):
    metrics = await _repository(request).get_daily_metrics(_now(request).date())
    return metrics.model_dump()


@router.get("/stale")
async def stale_views(request: Request):
    """Views invalidated since the last call; reading clears them."""
    consumed = request.app.state.views.consume()
    return {"stale": sorted(v.value for v in consumed)}
