"""
Tests for the record mapper: safe field access and record -> Job.
"""

from datetime import datetime, timezone

from job_pipeline.mapper import (
    lookup_string,
    parse_brief,
    parse_datetime,
    read_bool,
    read_number,
    read_str,
    record_to_job,
    safe_get,
)
from job_pipeline.models.fields import JOBS
from job_pipeline.models.job import ResponseType
from job_pipeline.models.stage import Stage


class ExplodingRecord:
    """A record whose field access raises, like a schema-less row."""

    id = 'recBoom'

    def get(self, field):
        raise KeyError(field)


class TestSafeGet:
    """The single field-access boundary never raises."""

    def test_missing_field(self, make_record):
        assert safe_get(make_record(), 'Nope') is None

    def test_raising_record(self):
        record = ExplodingRecord()
        assert safe_get(record, JOBS.STAGE) is None
        assert read_str(record, JOBS.STAGE) is None
        assert read_number(record, JOBS.BUDGET_AMOUNT) is None

    def test_read_str_empty_is_none(self, make_record):
        record = make_record(**{JOBS.CLIENT: ''})
        assert read_str(record, JOBS.CLIENT) is None

    def test_read_str_wrong_type_is_none(self, make_record):
        record = make_record(**{JOBS.CLIENT: 42})
        assert read_str(record, JOBS.CLIENT) is None


class TestReadNumber:
    def test_positive(self, make_record):
        assert read_number(make_record(**{JOBS.DEAL_VALUE: 1500}), JOBS.DEAL_VALUE) == 1500.0

    def test_zero_stays_zero(self, make_record):
        assert read_number(make_record(**{JOBS.DEAL_VALUE: 0}), JOBS.DEAL_VALUE) == 0.0

    def test_absent_is_none(self, make_record):
        assert read_number(make_record(), JOBS.DEAL_VALUE) is None

    def test_negative_is_none(self, make_record):
        assert read_number(make_record(**{JOBS.DEAL_VALUE: -5}), JOBS.DEAL_VALUE) is None

    def test_non_numeric_is_none(self, make_record):
        assert read_number(make_record(**{JOBS.DEAL_VALUE: '100'}), JOBS.DEAL_VALUE) is None
        assert read_number(make_record(**{JOBS.DEAL_VALUE: True}), JOBS.DEAL_VALUE) is None


class TestReadBoolAndLookups:
    def test_lookup_list(self, make_record):
        record = make_record(**{JOBS.BUILD_BUILDABLE: [True]})
        assert read_bool(record, JOBS.BUILD_BUILDABLE) is True

    def test_empty_lookup_list(self, make_record):
        record = make_record(**{JOBS.BUILD_BUILDABLE: []})
        assert read_bool(record, JOBS.BUILD_BUILDABLE) is None

    def test_lookup_string(self, make_record):
        record = make_record(**{JOBS.BUILD_BRIEF_YAML: ['routes: []']})
        assert lookup_string(record, JOBS.BUILD_BRIEF_YAML) == 'routes: []'


class TestParseDatetime:
    def test_zulu(self):
        assert parse_datetime('2026-03-10T09:30:00.000Z') == datetime(
            2026, 3, 10, 9, 30, tzinfo=timezone.utc
        )

    def test_date_only(self):
        assert parse_datetime('2026-03-10') == datetime(2026, 3, 10, tzinfo=timezone.utc)

    def test_garbage(self):
        assert parse_datetime('next tuesday') is None
        assert parse_datetime('') is None
        assert parse_datetime(None) is None


class TestParseBrief:
    def test_json(self):
        brief = parse_brief('{"routes": ["/", "/reports"], "template": "dashboard"}')
        assert brief.routes == ['/', '/reports']
        assert brief.template == 'dashboard'

    def test_yaml_with_pages(self):
        brief = parse_brief('template: web_app\npages:\n  - /home\nunique_interactions: drag and drop\n')
        assert brief.routes == ['/home']
        assert brief.template == 'web_app'
        assert brief.unique_interactions == 'drag and drop'

    def test_unknown_template(self):
        assert parse_brief('{"template": "mobile"}').template == 'unknown'

    def test_malformed(self):
        brief = parse_brief('{{{: not yaml: [')
        assert brief.routes == []
        assert brief.template == 'unknown'

    def test_empty(self):
        assert parse_brief(None).routes == []


class TestRecordToJob:
    def test_full_record(self, make_record):
        record = make_record(
            'recA',
            **{
                JOBS.JOB_ID: 'upwork-123',
                JOBS.STAGE: Stage.TOUCHPOINT_2.label,
                JOBS.JOB_TITLE: 'Build a CRM dashboard',
                JOBS.RESPONSE_TYPE: 'Interview',
                JOBS.BUDGET_AMOUNT: 800,
                JOBS.NEXT_ACTION_DATE: '2026-03-11T12:00:00.000Z',
                JOBS.LOOM_URL: 'https://loom.com/share/abc',
            },
        )
        job = record_to_job(record)

        assert job.id == 'recA'
        assert job.job_id == 'upwork-123'
        assert job.stage is Stage.TOUCHPOINT_2
        assert job.stage_label == Stage.TOUCHPOINT_2.label
        assert job.response_type is ResponseType.INTERVIEW
        assert job.is_hot_lead
        assert job.budget_amount == 800.0
        assert job.next_action_date == datetime(2026, 3, 11, 12, tzinfo=timezone.utc)
        assert job.loom_url == 'https://loom.com/share/abc'

    def test_sparse_record(self, make_record):
        """Missing fields stay None; identity and title fall back."""
        job = record_to_job(make_record('recB'))

        assert job.job_id == 'recB'
        assert job.title == 'Untitled Job'
        assert job.stage is None
        assert job.stage_label == ''
        assert job.response_type is None
        assert job.budget_amount is None
        assert job.next_action_date is None
        assert job.close_date is None

    def test_unknown_stage_keeps_raw_label(self, make_record):
        job = record_to_job(make_record(**{JOBS.STAGE: 'Archived'}))
        assert job.stage is None
        assert job.stage_label == 'Archived'

    def test_build_details_overrides(self, make_record):
        job = record_to_job(
            make_record(),
            buildable=True,
            buildable_reasoning='Simple CRUD app',
            brief='{"routes": ["/"], "template": "web_app"}',
            prototype_url='https://proto.example.com',
        )
        assert job.buildable is True
        assert job.buildable_reasoning == 'Simple CRUD app'
        assert job.template == 'web_app'
        assert job.routes == ['/']
        assert job.prototype_url == 'https://proto.example.com'

    def test_to_dict_drops_none(self, make_record):
        data = record_to_job(make_record('recC')).to_dict()
        assert data['id'] == 'recC'
        assert 'deal_value' not in data
