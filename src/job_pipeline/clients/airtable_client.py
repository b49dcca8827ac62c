"""
Airtable REST client for the Jobs Pipeline base.

Handles:
- Filtered, sorted selects with offset pagination
- Single-record reads
- Field updates on one record (one PATCH, all-or-nothing)

Every call is a single attempt; failures surface as AirtableError.
"""

import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from ..errors import AirtableError

logger = structlog.get_logger(__name__)


@dataclass
class Record:
    """One store row with graceful named-field access."""

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    created_time: str | None = None

    def get(self, name: str) -> Any:
        """Field value, or None when the field is absent or empty."""
        return self.fields.get(name)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> 'Record':
        return cls(
            id=payload['id'],
            fields=payload.get('fields') or {},
            created_time=payload.get('createdTime'),
        )


class AirtableClient:
    """
    Async Airtable client.

    Configuration via environment variables:
    - AIRTABLE_API_KEY: Required personal access token
    - AIRTABLE_BASE_ID: Required base ID (appXXXX)
    - AIRTABLE_API_URL: API root (default: https://api.airtable.com/v0)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_id: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the Airtable client.

        Args:
            api_key: Access token (defaults to AIRTABLE_API_KEY env var)
            base_id: Base ID (defaults to AIRTABLE_BASE_ID env var)
            api_url: API root URL (defaults to AIRTABLE_API_URL or the public API)
            timeout: Request timeout in seconds (defaults to HTTP_TIMEOUT_SECONDS or 30)
            http_client: Pre-built httpx client, mainly for tests
        """
        self.api_key = api_key or os.getenv('AIRTABLE_API_KEY')
        self.base_id = base_id or os.getenv('AIRTABLE_BASE_ID')
        self.api_url = (
            api_url or os.getenv('AIRTABLE_API_URL', 'https://api.airtable.com/v0')
        ).rstrip('/')

        if not self.api_key:
            raise ValueError('AIRTABLE_API_KEY environment variable is required')
        if not self.base_id:
            raise ValueError('AIRTABLE_BASE_ID environment variable is required')

        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or float(os.getenv('HTTP_TIMEOUT_SECONDS', '30')),
        )
        self._headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }

    def _table_url(self, table: str, record_id: str | None = None) -> str:
        url = f'{self.api_url}/{self.base_id}/{quote(table, safe="")}'
        if record_id:
            url = f'{url}/{record_id}'
        return url

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        response = await self._client.request(
            method, url, params=params, json=json, headers=self._headers
        )
        if response.is_success:
            return response.json()

        ctx = dict(context or {})
        ctx['status'] = response.status_code
        message = f'HTTP {response.status_code}'
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get('error')
            if isinstance(error, dict):
                ctx['error_type'] = error.get('type')
                message = error.get('message') or message
            elif isinstance(error, str):
                ctx['error_type'] = error
        raise AirtableError(
            f'Airtable {method} failed: {message}',
            status=response.status_code,
            context=ctx,
        )

    async def select(
        self,
        table: str,
        filter_by_formula: str | None = None,
        sort: list[tuple[str, str]] | None = None,
        fields: list[str] | None = None,
        max_records: int | None = None,
    ) -> list[Record]:
        """
        Fetch every record matching a formula, following pagination.

        Args:
            table: Table name
            filter_by_formula: Airtable formula; None selects all rows
            sort: (field, 'asc' | 'desc') pairs, in priority order
            fields: Restrict the returned fields
            max_records: Cap on the total number of records

        Returns:
            Matching records in the requested order
        """
        params: list[tuple[str, str]] = []
        if filter_by_formula:
            params.append(('filterByFormula', filter_by_formula))
        for i, (sort_field, direction) in enumerate(sort or []):
            params.append((f'sort[{i}][field]', sort_field))
            params.append((f'sort[{i}][direction]', direction))
        for name in fields or []:
            params.append(('fields[]', name))
        if max_records is not None:
            params.append(('maxRecords', str(max_records)))

        records: list[Record] = []
        offset: str | None = None
        context = {'table': table, 'formula': filter_by_formula}
        while True:
            page_params = params + ([('offset', offset)] if offset else [])
            payload = await self._request(
                'GET', self._table_url(table), params=page_params, context=context
            )
            records.extend(Record.from_api(r) for r in payload.get('records', []))
            offset = payload.get('offset')
            if not offset:
                break
            if max_records is not None and len(records) >= max_records:
                break

        logger.debug('airtable.select', table=table, count=len(records))
        return records[:max_records] if max_records is not None else records

    async def find(self, table: str, record_id: str) -> Record:
        """Fetch one record by ID."""
        payload = await self._request(
            'GET',
            self._table_url(table, record_id),
            context={'table': table, 'record_id': record_id},
        )
        return Record.from_api(payload)

    async def update(self, table: str, record_id: str, fields: dict[str, Any]) -> Record:
        """
        Update named fields on one record in a single call.

        Either every field is written or none is.
        """
        payload = await self._request(
            'PATCH',
            self._table_url(table, record_id),
            json={'fields': fields},
            context={'table': table, 'record_id': record_id, 'fields': sorted(fields)},
        )
        return Record.from_api(payload)

    async def close(self) -> None:
        await self._client.aclose()
