"""
HTTP client for the Job Pulse build service.

The control side never talks to the prototype builder directly: Job Pulse
moves the job's stage and starts (or rejects) the build. Non-2xx responses
are raised as BuildServiceError carrying the service's machine-readable
code; timeouts and connection errors propagate unchanged.
"""

import json
import os
from typing import Any

import httpx
import structlog

from ..errors import BuildServiceError

logger = structlog.get_logger(__name__)


def _normalize_base_url(raw: str) -> str:
    return raw if raw.startswith('http') else f'https://{raw}'


def parse_error_response(response: httpx.Response) -> BuildServiceError:
    """
    Turn a failed response into a BuildServiceError.

    Job Pulse answers failures with {"error": CODE, "message": ...}; a
    "code" key is accepted as well. Non-JSON bodies keep their first 200
    characters as the message.
    """
    text = response.text
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        body = None

    if isinstance(body, dict):
        code = body.get('code') or body.get('error') or 'UNKNOWN'
        message = body.get('message') or f'HTTP {response.status_code}'
        return BuildServiceError(response.status_code, str(code), str(message))

    return BuildServiceError(
        response.status_code,
        'UNKNOWN',
        text[:200] or f'HTTP {response.status_code}',
    )


class BuildServiceClient:
    """
    Async client for the build trigger/reject endpoints.

    Configuration via environment variables:
    - JOB_PULSE_URL: Service base URL (scheme optional, https assumed)
    - HTTP_TIMEOUT_SECONDS: Request timeout (default: 30)
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        raw_url = base_url or os.getenv('JOB_PULSE_URL', '')
        if not raw_url:
            raise ValueError('JOB_PULSE_URL environment variable is required')
        self.base_url = _normalize_base_url(raw_url).rstrip('/')
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or float(os.getenv('HTTP_TIMEOUT_SECONDS', '30')),
        )

    async def _post(self, path: str, body: dict[str, Any]) -> None:
        url = f'{self.base_url}{path}'
        response = await self._client.post(url, json=body)
        if not response.is_success:
            error = parse_error_response(response)
            logger.warning(
                'build_service.request_failed',
                path=path,
                status=error.status,
                code=error.code,
            )
            raise error

    async def trigger_build(
        self,
        job_id: str,
        approved_by: str,
        notes: str | None = None,
    ) -> None:
        """
        Approve a brief and start its prototype build.

        Endpoint: POST /api/builds/trigger/{job_id}

        Raises:
            BuildServiceError: On a non-2xx response
        """
        body: dict[str, Any] = {'approved_by': approved_by}
        if notes:
            body['notes'] = notes
        await self._post(f'/api/builds/trigger/{job_id}', body)

    async def reject_build(
        self,
        job_id: str,
        reason: str,
        rejected_by: str,
        notes: str | None = None,
    ) -> None:
        """
        Reject a brief with a reason.

        Endpoint: POST /api/builds/reject/{job_id}

        Raises:
            BuildServiceError: On a non-2xx response
        """
        body: dict[str, Any] = {'reason': reason, 'rejected_by': rejected_by}
        if notes:
            body['notes'] = notes
        await self._post(f'/api/builds/reject/{job_id}', body)

    async def close(self) -> None:
        await self._client.aclose()
