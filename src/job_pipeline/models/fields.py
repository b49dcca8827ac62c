"""
Airtable table and field names for the Jobs Pipeline base.

Several fields are provisioned lazily in the base; code reading them must go
through the mapper's safe accessors.
"""


class TABLES:
    JOBS_PIPELINE = 'Jobs Pipeline'
    BUILD_DETAILS = 'Build Details'


class JOBS:
    """Jobs Pipeline fields."""

    # Core
    JOB_ID = 'Job ID'
    JOB_URL = 'Job URL'
    STAGE = 'Stage'
    POSTED_DATE = 'Posted Date'
    JOB_TITLE = 'Job Title'
    JOB_DESCRIPTION = 'Job Description'
    BUILD_DETAILS = 'Build Details'
    BUDGET_TYPE = 'Budget Type'
    BUDGET_AMOUNT = 'Budget Amount'
    SKILLS = 'Skills'
    SCRAPED_AT = 'Scraped At'
    SOURCE = 'Source'

    # Content
    AI_COVER_LETTER = 'AI Cover Letter'
    AI_LOOM_OUTLINE = 'AI Loom Outline'
    PROTOTYPE_URL = 'Prototype URL'
    LOOM_URL = 'Loom URL'

    # Application
    APPLIED_AT = 'Applied At'
    NEXT_ACTION_DATE = 'Next Action Date'
    CLOSE_DATE = 'Close Date'

    # Lazily provisioned
    APPROVED_DATE = 'Approved Date'
    DEPLOYED_DATE = 'Deployed Date'
    LOOM_RECORDED_DATE = 'Loom Recorded Date'
    RESPONSE_DATE = 'Response Date'
    RESPONSE_TYPE = 'Response Type'
    CALL_COMPLETED_DATE = 'Call Completed Date'
    CONTRACT_SENT_DATE = 'Contract Sent Date'
    DEAL_VALUE = 'Deal Value'
    LOST_REASON = 'Lost Reason'
    CLIENT = 'Client'
    LAST_FOLLOW_UP_DATE = 'Last Follow Up Date'

    # Lookups from the linked Build Details record
    BUILD_BUILDABLE = 'Buildable (from Build Details)'
    BUILD_BUILDABLE_REASONING = 'Buildable Reasoning (from Build Details)'
    BUILD_BRIEF_YAML = 'Brief YAML (from Build Details)'


class BUILD:
    """Build Details fields."""

    NAME = 'Name'
    JOBS_PIPELINE = 'Jobs Pipeline'
    STATUS = 'Status'
    BUILDABLE = 'Buildable'
    BUILDABLE_REASONING = 'Buildable Reasoning'
    BRIEF_YAML = 'Brief YAML'
    PROTOTYPE_URL = 'Prototype URL'
    BUILD_STARTED = 'Build Started'
    BUILD_COMPLETED = 'Build Completed'
    BUILD_ERROR = 'Build Error'
