"""Tests for POST /jobs/{job_id}/* user actions."""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from job_pipeline.api.routes.actions import router
from job_pipeline.errors import AirtableError, BuildServiceError
from job_pipeline.models.stage import Stage
from job_pipeline.views import StaleViewRegistry, View


def _make_app(repository, now, build_client=None, text_client=None) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    app.state.repository = repository
    app.state.build_client = build_client or AsyncMock()
    app.state.text_client = text_client
    app.state.views = StaleViewRegistry()
    app.state.neetocal_link = "https://cal.test/steve"
    app.state.clock = lambda: now
    return app


@pytest.fixture
def repository() -> AsyncMock:
    return AsyncMock()


class TestApprovalRoutes:
    def test_approve_reads_session_cookie(self, repository, now):
        build_client = AsyncMock()
        app = _make_app(repository, now, build_client=build_client)
        client = TestClient(app)
        session = json.dumps({"name": "Steve"}, separators=(",", ":"))

        response = client.post(
            "/jobs/rec1/approve",
            json={"notes": "Go"},
            headers={"Cookie": f"session={session}"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        build_client.trigger_build.assert_awaited_once_with("rec1", "Steve", "Go")
        assert app.state.views.is_stale(View.APPROVE)

    def test_approve_structured_failure(self, repository, now):
        build_client = AsyncMock()
        build_client.trigger_build.side_effect = BuildServiceError(
            409, "WRONG_STAGE", "Job is not pending approval"
        )
        client = TestClient(_make_app(repository, now, build_client=build_client))

        response = client.post("/jobs/rec1/approve", json={})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Job is not pending approval",
            "code": "WRONG_STAGE",
        }

    def test_reject_requires_reason(self, repository, now):
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/reject", json={"reason": " "})

        assert response.status_code == 400
        assert response.json()["error"] == "Rejection reason cannot be empty"

    def test_build_failed(self, repository, now):
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/build-failed")

        assert response.status_code == 200
        repository.update_job_stage.assert_awaited_once_with("rec1", Stage.BUILD_FAILED)


class TestInboxRoutes:
    def test_follow_up_advances(self, repository, make_job, now):
        repository.get_job.return_value = make_job(
            id="rec1", stage=Stage.TOUCHPOINT_1, stage_label=Stage.TOUCHPOINT_1.label
        )
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/follow-up")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["previous_stage"] == "touchpoint_1"
        assert data["next_stage"] == "touchpoint_2"
        assert data["next_action_date"] == "2026-03-11T12:00:00+00:00"

    def test_follow_up_without_progression_is_conflict(self, repository, make_job, now):
        repository.get_job.return_value = make_job(
            id="rec1", stage=Stage.LIGHT_ENGAGEMENT, stage_label=Stage.LIGHT_ENGAGEMENT.label
        )
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/follow-up")

        assert response.status_code == 409
        assert response.json()["error"] == "No progression defined for stage: 🧐 Light Engagement"
        repository.update_job_stage.assert_not_called()

    def test_store_failure_is_bad_gateway(self, repository, now):
        repository.update_job_fields.side_effect = AirtableError("Airtable PATCH failed", status=500)
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/call-done")

        assert response.status_code == 502
        assert response.json()["success"] is False

    def test_log_hot_response(self, repository, now):
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/response", json={"response_type": "Shortlist"})

        assert response.status_code == 200
        assert response.json()["data"] == {"stage": "light_engagement"}

    def test_unknown_response_type_rejected(self, repository, now):
        client = TestClient(_make_app(repository, now))
        response = client.post("/jobs/rec1/response", json={"response_type": "Maybe"})
        assert response.status_code == 422

    def test_negative_deal_value_rejected(self, repository, now):
        client = TestClient(_make_app(repository, now))
        response = client.post("/jobs/rec1/contract-signed", json={"deal_value": -5})
        assert response.status_code == 422
        repository.update_job_stage.assert_not_called()

    def test_follow_up_message(self, repository, make_job, now):
        repository.get_job.return_value = make_job(id="rec1", loom_url="https://loom.test/x")
        text_client = AsyncMock()
        text_client.generate_text.return_value = "Book here: {{NEETOCAL_LINK}}"
        client = TestClient(_make_app(repository, now, text_client=text_client))

        response = client.post("/jobs/rec1/follow-up-message", json={"stage": "touchpoint_2"})

        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Book here: https://cal.test/steve"


class TestSendAndClosingRoutes:
    def test_applied(self, repository, now):
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/applied")

        assert response.status_code == 200
        assert repository.update_job_stage.call_args.args[1] is Stage.TOUCHPOINT_1

    def test_empty_loom_url(self, repository, now):
        client = TestClient(_make_app(repository, now))
        response = client.post("/jobs/rec1/loom", json={"url": ""})
        assert response.status_code == 400

    def test_lost(self, repository, now):
        client = TestClient(_make_app(repository, now))

        response = client.post("/jobs/rec1/lost", json={"reason": "Budget"})

        assert response.status_code == 200
        assert repository.update_job_stage.call_args.args[1] is Stage.CLOSED_LOST
