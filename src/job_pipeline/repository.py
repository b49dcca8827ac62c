"""
Jobs Pipeline repository: reads and writes against the Airtable store.

Provides high-level methods for the dashboard views and the workflow
writes. Key design decisions:
- Writes are a single update call per action; a stage change and the
  fields that go with it are never split across calls.
- Dashboard reads tolerate fields that have not been provisioned yet: when
  the store rejects a formula, the read falls back to a simpler formula or
  to an empty result, and logs a warning.
- Reads for workflows (get_job) are always fresh; nothing is cached here.
"""

import asyncio
from datetime import date
from typing import Any

import structlog

from .classification.grouping import count_pipeline_stages
from .clients import formula as f
from .clients.airtable_client import AirtableClient, Record
from .errors import AirtableError
from .mapper import read_bool, read_str, record_to_job, safe_get
from .models.fields import BUILD, JOBS, TABLES
from .models.job import HOT_LEAD_TYPES, DailyMetrics, Job, PipelineCounts
from .models.stage import (
    CLOSED_STAGES,
    ENGAGEMENT_STAGES,
    FOLLOW_UP_STAGES,
    READY_TO_SEND_STAGES,
    Stage,
)

logger = structlog.get_logger(__name__)

PIPELINE_COUNT_LIMIT = 500


def _labels(stages) -> list[str]:
    return [s.label for s in stages]


class JobRepository:
    """CRUD operations for Jobs Pipeline records."""

    def __init__(self, airtable: AirtableClient):
        self.airtable = airtable

    # =========================================================================
    # Writes
    # =========================================================================

    async def update_job_fields(self, record_id: str, fields: dict[str, Any]) -> None:
        """
        Update named fields on one job record.

        Raises:
            AirtableError: On store failure (logged, then re-raised)
        """
        try:
            await self.airtable.update(TABLES.JOBS_PIPELINE, record_id, fields)
        except AirtableError as e:
            logger.error(
                'repository.update_failed',
                record_id=record_id,
                fields=sorted(fields),
                error=e.message,
            )
            raise

    async def update_job_stage(
        self,
        record_id: str,
        stage: Stage,
        additional_fields: dict[str, Any] | None = None,
    ) -> None:
        """Set a job's stage together with any additional fields, in one call."""
        fields = {JOBS.STAGE: stage.label, **(additional_fields or {})}
        await self.update_job_fields(record_id, fields)

    # =========================================================================
    # Single Record
    # =========================================================================

    async def verify_connectivity(self) -> None:
        """
        Cheapest possible read against the jobs table.

        Raises:
            AirtableError: If the store is unreachable or rejects the credentials
        """
        await self.airtable.select(TABLES.JOBS_PIPELINE, fields=[JOBS.STAGE], max_records=1)

    async def get_job(self, record_id: str) -> Job:
        """Fresh read of one job."""
        record = await self.airtable.find(TABLES.JOBS_PIPELINE, record_id)
        return record_to_job(record)

    async def _find_build_details(self, record: Record) -> Record | None:
        """Fetch the Build Details record linked to a job, if any."""
        linked = safe_get(record, JOBS.BUILD_DETAILS)
        if not isinstance(linked, list) or not linked:
            return None
        try:
            return await self.airtable.find(TABLES.BUILD_DETAILS, linked[0])
        except AirtableError as e:
            logger.error(
                'repository.build_details_fetch_failed',
                record_id=record.id,
                build_details_id=linked[0],
                error=e.message,
            )
            return None

    # =========================================================================
    # Approval Views
    # =========================================================================

    async def get_jobs_to_approve(self) -> list[Job]:
        """
        Buildable jobs pending human approval, oldest first.

        Uses the Build Details lookup fields when they exist (one call) and
        falls back to one Build Details read per job otherwise.
        """
        sort = [(JOBS.SCRAPED_AT, 'asc')]
        pending = f.eq(JOBS.STAGE, Stage.PENDING_APPROVAL.label)
        try:
            records = await self.airtable.select(
                TABLES.JOBS_PIPELINE,
                filter_by_formula=f.and_(pending, f.is_true(JOBS.BUILD_BUILDABLE)),
                sort=sort,
            )
            return [record_to_job(r, buildable=True) for r in records]
        except AirtableError as e:
            logger.warning('repository.approve_lookup_unavailable', error=e.message)

        records = await self.airtable.select(
            TABLES.JOBS_PIPELINE, filter_by_formula=pending, sort=sort
        )
        details = await asyncio.gather(*(self._find_build_details(r) for r in records))

        jobs = []
        for record, build in zip(records, details):
            if build is None or not read_bool(build, BUILD.BUILDABLE):
                continue
            jobs.append(
                record_to_job(
                    record,
                    buildable=True,
                    buildable_reasoning=read_str(build, BUILD.BUILDABLE_REASONING) or '',
                    brief=read_str(build, BUILD.BRIEF_YAML) or '',
                )
            )
        return jobs

    async def get_jobs_building(self) -> list[Job]:
        """Jobs whose prototype build is running, oldest first."""
        records = await self.airtable.select(
            TABLES.JOBS_PIPELINE,
            filter_by_formula=f.eq(JOBS.STAGE, Stage.PROTOTYPE_BUILDING.label),
            sort=[(JOBS.SCRAPED_AT, 'asc')],
        )
        return [record_to_job(r) for r in records]

    # =========================================================================
    # Send Queue
    # =========================================================================

    async def get_ready_to_send(self) -> list[Job]:
        """Jobs with a finished prototype that have not been applied to yet."""
        records = await self.airtable.select(
            TABLES.JOBS_PIPELINE,
            filter_by_formula=f.and_(
                f.any_of(JOBS.STAGE, _labels(READY_TO_SEND_STAGES)),
                f.is_blank(JOBS.APPLIED_AT),
            ),
            sort=[(JOBS.SCRAPED_AT, 'asc')],
        )
        details = await asyncio.gather(*(self._find_build_details(r) for r in records))
        return [
            record_to_job(
                record,
                brief=read_str(build, BUILD.BRIEF_YAML) if build else None,
                prototype_url=read_str(build, BUILD.PROTOTYPE_URL) if build else None,
            )
            for record, build in zip(records, details)
        ]

    # =========================================================================
    # Inbox Views
    # =========================================================================

    async def _select_jobs_with_fallback(
        self,
        view: str,
        formulas: list[str],
        sort: list[tuple[str, str]],
    ) -> list[Job]:
        """
        Try each formula in turn until the store accepts one.

        Later formulas drop references to lazily provisioned fields. If every
        formula is rejected the view is empty.
        """
        for formula in formulas:
            try:
                records = await self.airtable.select(
                    TABLES.JOBS_PIPELINE, filter_by_formula=formula, sort=sort
                )
                return [record_to_job(r) for r in records]
            except AirtableError as e:
                logger.warning('repository.view_formula_rejected', view=view, error=e.message)
        return []

    async def get_hot_leads(self) -> list[Job]:
        """Open jobs whose client answered with a hot-lead response, newest first."""
        return await self._select_jobs_with_fallback(
            'hot_leads',
            [
                f.and_(
                    f.any_of(JOBS.RESPONSE_TYPE, [t.value for t in HOT_LEAD_TYPES]),
                    f.not_(f.any_of(JOBS.STAGE, _labels(CLOSED_STAGES))),
                )
            ],
            sort=[(JOBS.SCRAPED_AT, 'desc')],
        )

    async def get_awaiting_response(self) -> list[Job]:
        """Jobs in a follow-up stage with no response yet, by application date."""
        stage_filter = f.any_of(JOBS.STAGE, _labels(FOLLOW_UP_STAGES))
        return await self._select_jobs_with_fallback(
            'awaiting_response',
            [f.and_(stage_filter, f.is_blank(JOBS.RESPONSE_DATE)), stage_filter],
            sort=[(JOBS.APPLIED_AT, 'asc')],
        )

    async def get_follow_ups(self) -> list[Job]:
        """Jobs needing a follow-up message, by next action date."""
        stage_filter = f.any_of(JOBS.STAGE, _labels(FOLLOW_UP_STAGES))
        return await self._select_jobs_with_fallback(
            'follow_ups',
            [f.and_(stage_filter, f.is_blank(JOBS.RESPONSE_DATE)), stage_filter],
            sort=[(JOBS.NEXT_ACTION_DATE, 'asc')],
        )

    async def get_follow_ups_due(self) -> list[Job]:
        """Applied jobs with no response whose next action date is today or earlier."""
        open_stages = f.not_(f.any_of(JOBS.STAGE, _labels(CLOSED_STAGES)))
        applied = f.not_blank(JOBS.APPLIED_AT)
        due = f.lte_today(JOBS.NEXT_ACTION_DATE)
        return await self._select_jobs_with_fallback(
            'follow_ups_due',
            [
                f.and_(applied, f.is_blank(JOBS.RESPONSE_DATE), due, open_stages),
                f.and_(applied, due, open_stages),
            ],
            sort=[(JOBS.NEXT_ACTION_DATE, 'asc')],
        )

    # =========================================================================
    # Closing Board
    # =========================================================================

    async def get_active_deals(self) -> list[Job]:
        """Engaged deals plus closed-won deals; the board keeps only recent wins."""
        return await self._select_jobs_with_fallback(
            'closing',
            [f.any_of(JOBS.STAGE, _labels((*ENGAGEMENT_STAGES, Stage.CLOSED_WON)))],
            sort=[(JOBS.SCRAPED_AT, 'asc')],
        )

    # =========================================================================
    # Analytics
    # =========================================================================

    async def get_pipeline_counts(self) -> PipelineCounts:
        """Count every job by stage group from a single stage-only read."""
        records = await self.airtable.select(
            TABLES.JOBS_PIPELINE,
            fields=[JOBS.STAGE],
            max_records=PIPELINE_COUNT_LIMIT,
        )
        return count_pipeline_stages(
            Stage.from_label(read_str(r, JOBS.STAGE)) for r in records
        )

    async def _count_today(self, field: str) -> int:
        try:
            records = await self.airtable.select(
                TABLES.JOBS_PIPELINE,
                filter_by_formula=f.is_same_day_today(field),
                fields=[field],
            )
        except AirtableError as e:
            logger.warning('repository.daily_metric_unavailable', field=field, error=e.message)
            return 0
        return len(records)

    async def get_daily_metrics(self, today: date) -> DailyMetrics:
        """How many jobs hit each milestone today."""
        counted = [
            JOBS.SCRAPED_AT,
            JOBS.APPROVED_DATE,
            JOBS.DEPLOYED_DATE,
            JOBS.APPLIED_AT,
            JOBS.RESPONSE_DATE,
            JOBS.CALL_COMPLETED_DATE,
            JOBS.CLOSE_DATE,
        ]
        (
            jobs_detected,
            jobs_approved,
            prototypes_built,
            applications_sent,
            responses_received,
            calls_completed,
            contracts_signed,
        ) = await asyncio.gather(*(self._count_today(field) for field in counted))

        return DailyMetrics(
            jobs_detected=jobs_detected,
            jobs_approved=jobs_approved,
            prototypes_built=prototypes_built,
            applications_sent=applications_sent,
            responses_received=responses_received,
            calls_completed=calls_completed,
            contracts_signed=contracts_signed,
            date=today.isoformat(),
        )
