"""
Record mapper: raw store record -> Job.

The store schema evolves independently of this code, so fields may not
exist yet. Every read goes through safe_get(), which never raises; the
typed readers below turn missing or mistyped values into None.
"""

import json
from datetime import datetime, timezone
from typing import Any, Protocol

import structlog
import yaml

from .models.fields import JOBS
from .models.job import BriefData, Job, ResponseType
from .models.stage import Stage

logger = structlog.get_logger(__name__)

_TEMPLATES = ('dashboard', 'web_app')


class RecordLike(Protocol):
    """Anything exposing a record id and named-field access."""

    id: str

    def get(self, field: str) -> Any: ...


# =============================================================================
# Field Accessors
# =============================================================================


def safe_get(record: RecordLike, field: str) -> Any:
    """Read a field, returning None if the field is missing or unreadable."""
    try:
        return record.get(field)
    except (KeyError, AttributeError, TypeError):
        return None


def read_str(record: RecordLike, field: str) -> str | None:
    """Non-empty string value, else None."""
    value = safe_get(record, field)
    if isinstance(value, str) and value:
        return value
    return None


def read_number(record: RecordLike, field: str) -> float | None:
    """Non-negative numeric value, else None. Zero is kept as zero."""
    value = safe_get(record, field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0:
        return None
    return float(value)


def read_bool(record: RecordLike, field: str) -> bool | None:
    value = safe_get(record, field)
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, bool) else None


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp or date; naive values are taken as UTC."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def read_datetime(record: RecordLike, field: str) -> datetime | None:
    return parse_datetime(safe_get(record, field))


def lookup_string(record: RecordLike, field: str) -> str | None:
    """
    Read a lookup field as a single string.

    Lookup fields over a one-to-one link come back as single-element lists.
    """
    value = safe_get(record, field)
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str) and value:
        return value
    return None


# =============================================================================
# Brief Parsing
# =============================================================================


def parse_brief(brief: str | None) -> BriefData:
    """
    Extract routes, template and unique interactions from a brief.

    Briefs are stored as JSON, older ones as YAML. Anything unparseable
    gives an empty BriefData.
    """
    if not brief:
        return BriefData()

    try:
        parsed = json.loads(brief)
    except json.JSONDecodeError:
        try:
            parsed = yaml.safe_load(brief)
        except yaml.YAMLError as e:
            logger.warning('mapper.brief_unparseable', error=str(e))
            return BriefData()

    if not isinstance(parsed, dict):
        return BriefData()

    routes = parsed.get('routes') or parsed.get('pages') or []
    template = parsed.get('template')
    unique = parsed.get('unique_interactions') or parsed.get('uniqueInteractions') or ''

    return BriefData(
        routes=routes if isinstance(routes, list) else [],
        template=template if template in _TEMPLATES else 'unknown',
        unique_interactions=unique if isinstance(unique, str) else str(unique),
    )


# =============================================================================
# Record -> Job
# =============================================================================


def record_to_job(
    record: RecordLike,
    *,
    buildable: bool | None = None,
    buildable_reasoning: str | None = None,
    brief: str | None = None,
    prototype_url: str | None = None,
) -> Job:
    """
    Map a Jobs Pipeline record to a Job.

    Build-details values live on a linked record; callers that have already
    resolved them pass them in, otherwise the lookup fields are read.

    Args:
        record: Raw store record
        buildable: Resolved Buildable flag from Build Details
        buildable_reasoning: Resolved reasoning from Build Details
        brief: Resolved brief text from Build Details
        prototype_url: Fallback prototype URL from Build Details

    Returns:
        Normalised Job
    """
    stage_label = read_str(record, JOBS.STAGE) or ''
    if brief is None:
        brief = lookup_string(record, JOBS.BUILD_BRIEF_YAML)
    if buildable is None:
        buildable = read_bool(record, JOBS.BUILD_BUILDABLE)
    if buildable_reasoning is None:
        buildable_reasoning = lookup_string(record, JOBS.BUILD_BUILDABLE_REASONING)

    brief_data = parse_brief(brief) if brief else None

    return Job(
        id=record.id,
        job_id=read_str(record, JOBS.JOB_ID) or record.id,
        stage=Stage.from_label(stage_label),
        stage_label=stage_label,
        response_type=ResponseType.from_value(read_str(record, JOBS.RESPONSE_TYPE)),
        title=read_str(record, JOBS.JOB_TITLE) or 'Untitled Job',
        description=read_str(record, JOBS.JOB_DESCRIPTION) or '',
        client=read_str(record, JOBS.CLIENT),
        skills=read_str(record, JOBS.SKILLS),
        brief=brief,
        buildable=buildable,
        buildable_reasoning=buildable_reasoning,
        template=brief_data.template if brief_data else 'unknown',
        routes=brief_data.routes if brief_data else None,
        unique_interactions=brief_data.unique_interactions if brief_data else None,
        job_url=read_str(record, JOBS.JOB_URL),
        prototype_url=read_str(record, JOBS.PROTOTYPE_URL) or prototype_url,
        loom_url=read_str(record, JOBS.LOOM_URL),
        cover_letter=read_str(record, JOBS.AI_COVER_LETTER),
        ai_loom_outline=read_str(record, JOBS.AI_LOOM_OUTLINE),
        budget_amount=read_number(record, JOBS.BUDGET_AMOUNT),
        budget_type=read_str(record, JOBS.BUDGET_TYPE),
        deal_value=read_number(record, JOBS.DEAL_VALUE),
        lost_reason=read_str(record, JOBS.LOST_REASON),
        scraped_at=read_datetime(record, JOBS.SCRAPED_AT),
        applied_at=read_datetime(record, JOBS.APPLIED_AT),
        approved_date=read_datetime(record, JOBS.APPROVED_DATE),
        deployed_date=read_datetime(record, JOBS.DEPLOYED_DATE),
        loom_recorded_date=read_datetime(record, JOBS.LOOM_RECORDED_DATE),
        response_date=read_datetime(record, JOBS.RESPONSE_DATE),
        next_action_date=read_datetime(record, JOBS.NEXT_ACTION_DATE),
        last_follow_up_date=read_datetime(record, JOBS.LAST_FOLLOW_UP_DATE),
        call_completed_date=read_datetime(record, JOBS.CALL_COMPLETED_DATE),
        contract_sent_date=read_datetime(record, JOBS.CONTRACT_SENT_DATE),
        close_date=read_datetime(record, JOBS.CLOSE_DATE),
    )
