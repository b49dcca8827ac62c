"""
Custom exceptions and error handling for the Job Pipeline ops core.

Provides:
- Typed exception hierarchy for different failure modes
- Error context preservation for debugging
- ActionResult, the uniform outcome of every user-facing action
"""

from dataclasses import dataclass, field
from typing import Any


class JobPipelineError(Exception):
    """Base exception for all job pipeline errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(JobPipelineError):
    """Base class for external collaborator errors."""

    pass


class AirtableError(ClientError):
    """Error reading from or writing to the Airtable record store."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.status = status


# Machine-readable codes returned by the Job Pulse build service.
BUILD_ERROR_CODES = frozenset(
    {
        'WRONG_STAGE',
        'NOT_BUILDABLE',
        'INVALID_BRIEF',
        'JOB_NOT_FOUND',
        'BUILD_DETAILS_NOT_FOUND',
        'INVALID_JOB_ID',
        'MISSING_FIELD',
        'INTERNAL_ERROR',
    }
)


class BuildServiceError(ClientError):
    """
    Structured failure from the build service.

    Carries the HTTP status and a machine-readable code so callers can
    branch on the cause without matching on the message. Codes outside
    BUILD_ERROR_CODES are normalised to 'UNKNOWN'.
    """

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.status = status
        self.code = code if code in BUILD_ERROR_CODES else 'UNKNOWN'


class TextGenerationError(ClientError):
    """Error from the AI text-generation service."""

    pass


# =============================================================================
# Pipeline Errors
# =============================================================================


class PipelineError(JobPipelineError):
    """Base class for pipeline state machine errors."""

    pass


class ValidationError(PipelineError):
    """Caller input validation failed."""

    pass


class NoProgressionDefinedError(PipelineError):
    """Advancement was requested for a stage with no successor."""

    def __init__(self, stage: str, context: dict[str, Any] | None = None):
        super().__init__(f"No progression defined for stage: {stage}", context=context)
        self.stage = stage


class PromptError(PipelineError):
    """No follow-up prompt exists for the requested stage."""

    pass


# =============================================================================
# Action Results
# =============================================================================


@dataclass
class ActionResult:
    """
    Outcome of a user action (approve, reject, advance, ...).

    `code` is only populated for structured failures; a generic failure
    carries a message and `code=None`.
    """

    success: bool
    error: str | None = None
    code: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **data: Any) -> 'ActionResult':
        return cls(success=True, data=data)

    @classmethod
    def from_exception(cls, exc: BaseException, default_message: str) -> 'ActionResult':
        """Build a failed result, preserving the code of structured failures."""
        if isinstance(exc, JobPipelineError):
            message = exc.message
        else:
            message = str(exc) or default_message
        code = exc.code if isinstance(exc, BuildServiceError) else None
        return cls(success=False, error=message, code=code)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {'success': self.success}
        if self.error is not None:
            result['error'] = self.error
        if self.code is not None:
            result['code'] = self.code
        if self.data:
            result['data'] = self.data
        return result


# =============================================================================
# Error Handling Utilities
# =============================================================================


def wrap_openai_error(exc: Exception, context: dict[str, Any] | None = None) -> TextGenerationError:
    """
    Wrap an OpenAI exception in our typed error hierarchy.

    Args:
        exc: The original exception
        context: Additional context for debugging

    Returns:
        TextGenerationError with the original error preserved in context
    """
    ctx = context or {}
    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__

    error_str = str(exc).lower()
    if 'rate limit' in error_str or 'rate_limit' in error_str:
        return TextGenerationError(f"Text generation rate limited: {exc}", context=ctx)
    return TextGenerationError(f"Text generation failed: {exc}", context=ctx)
