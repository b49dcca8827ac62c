"""
Job Pipeline Ops Core

Operational core of a freelance job sales pipeline: scraped listings are
approved for prototype builds, applied to, followed up through a fixed
touchpoint sequence and closed, with Airtable as the record store.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .models import Job, ResponseType, Stage
from .repository import JobRepository
from .views import StaleViewRegistry, View
from .workflows import (
    Advancement,
    ApprovalWorkflow,
    ClosingWorkflow,
    FollowUpWorkflow,
    ReadyToSendWorkflow,
)
from .logging import (
    configure_logging,
    get_logger,
    logging_context,
    ActionTimer,
)
from .errors import (
    JobPipelineError,
    ClientError,
    AirtableError,
    BuildServiceError,
    TextGenerationError,
    PipelineError,
    ValidationError,
    NoProgressionDefinedError,
    PromptError,
    ActionResult,
)

__all__ = [
    # Version
    '__version__',
    # Models
    'Job',
    'ResponseType',
    'Stage',
    # Repository
    'JobRepository',
    # Views
    'View',
    'StaleViewRegistry',
    # Workflows
    'ApprovalWorkflow',
    'FollowUpWorkflow',
    'Advancement',
    'ClosingWorkflow',
    'ReadyToSendWorkflow',
    # Logging
    'configure_logging',
    'get_logger',
    'logging_context',
    'ActionTimer',
    # Errors
    'JobPipelineError',
    'ClientError',
    'AirtableError',
    'BuildServiceError',
    'TextGenerationError',
    'PipelineError',
    'ValidationError',
    'NoProgressionDefinedError',
    'PromptError',
    'ActionResult',
]
