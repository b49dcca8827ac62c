"""
Tests for send queue actions.
"""

from unittest.mock import AsyncMock

import pytest

from job_pipeline.errors import AirtableError
from job_pipeline.models.fields import JOBS
from job_pipeline.models.stage import Stage
from job_pipeline.views import StaleViewRegistry, View
from job_pipeline.workflows import ReadyToSendWorkflow


@pytest.fixture
def repository() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def views() -> StaleViewRegistry:
    return StaleViewRegistry()


@pytest.fixture
def workflow(repository, views, now) -> ReadyToSendWorkflow:
    return ReadyToSendWorkflow(repository, views, clock=lambda: now)


class TestSaveLoomUrl:
    @pytest.mark.asyncio
    async def test_saves_trimmed_url(self, workflow, repository, views):
        result = await workflow.save_loom_url('rec1', '  https://loom.com/share/abc \n')

        assert result.success
        repository.update_job_fields.assert_awaited_once_with(
            'rec1', {JOBS.LOOM_URL: 'https://loom.com/share/abc'}
        )
        assert views.is_stale(View.READY_TO_SEND)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('url', ['', '   '])
    async def test_empty_url_rejected(self, workflow, repository, url):
        result = await workflow.save_loom_url('rec1', url)

        assert not result.success
        assert result.error == 'Loom URL cannot be empty'
        repository.update_job_fields.assert_not_called()


class TestMarkApplied:
    @pytest.mark.asyncio
    async def test_starts_touchpoint_sequence(self, workflow, repository, views):
        result = await workflow.mark_applied('rec1')

        assert result.success
        assert result.data['next_action_date'] == '2026-03-11T12:00:00+00:00'
        repository.update_job_stage.assert_awaited_once_with(
            'rec1',
            Stage.TOUCHPOINT_1,
            {
                JOBS.APPLIED_AT: '2026-03-10T12:00:00.000Z',
                JOBS.NEXT_ACTION_DATE: '2026-03-11T12:00:00.000Z',
                JOBS.LOOM_RECORDED_DATE: '2026-03-10T12:00:00.000Z',
            },
        )
        assert views.consume() == {View.READY_TO_SEND, View.INBOX, View.PIPELINE}

    @pytest.mark.asyncio
    async def test_store_failure(self, workflow, repository, views):
        repository.update_job_stage.side_effect = AirtableError('Airtable PATCH failed')

        result = await workflow.mark_applied('rec1')

        assert not result.success
        assert views.consume() == set()
