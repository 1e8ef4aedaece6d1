"""Client for the remote FIR service with retry logic and session headers."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError

from firdesk.config import get_settings
from firdesk.schemas.filters import FilterCriteria
from firdesk.schemas.fir import FIRPage, FIRRecord, StatusUpdateRequest

logger = logging.getLogger(__name__)
settings = get_settings()

HeadersProvider = Callable[[], dict[str, str]]


class FIRClientError(Exception):
    """Base exception for FIR client errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FIRClient:
    """
    Client for the FIR REST service.

    Features:
    - Session headers supplied by an external provider (opaque to this client)
    - Exponential backoff retry for reads (429, 5xx, transport errors)
    - Status updates are sent once; action notes are appended server-side
    """

    def __init__(
        self,
        base_url: str = settings.api_base_url,
        headers_provider: HeadersProvider | None = None,
        max_retries: int = settings.max_retries,
        timeout: float = settings.request_timeout_seconds,
        backoff: float = settings.retry_backoff_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers_provider = headers_provider or _token_headers
        self.max_retries = max_retries
        self.timeout = timeout
        self.backoff = backoff
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        headers.update(self.headers_provider())
        return headers

    async def _request_with_retry(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make HTTP request, retrying reads with exponential backoff."""
        url = f"{self.base_url}{path}"
        # Never replay a write
        attempts = self.max_retries if method == "GET" else 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    response = await client.request(
                        method, url, headers=self._headers(), params=params, json=json
                    )
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as e:
                        # e.g. an HTML error page from a gateway
                        raise FIRClientError(
                            "Invalid JSON response", status_code=response.status_code
                        ) from e

            except httpx.HTTPStatusError as e:
                last_error = e
                status = e.response.status_code
                if status == 429:  # Rate limited
                    wait_time = 2**attempt * 10 * self.backoff
                    logger.warning(f"Rate limited, waiting {wait_time}s before retry")
                    await asyncio.sleep(wait_time)
                elif status >= 500:  # Server error
                    wait_time = 2**attempt * self.backoff
                    logger.warning(f"Server error {status}, retry in {wait_time}s")
                    await asyncio.sleep(wait_time)
                else:
                    raise FIRClientError(f"HTTP error: {e}", status_code=status) from e

            except httpx.RequestError as e:
                last_error = e
                wait_time = 2**attempt * self.backoff
                logger.warning(f"Request error: {e}, retry in {wait_time}s")
                await asyncio.sleep(wait_time)

        status_code = None
        if isinstance(last_error, httpx.HTTPStatusError):
            status_code = last_error.response.status_code
        raise FIRClientError(
            f"Failed after {attempts} attempt(s): {last_error}", status_code=status_code
        )

    async def fetch_page(self, criteria: FilterCriteria, page: int) -> FIRPage:
        """
        Fetch one page of FIRs matching ``criteria``.

        Args:
            criteria: Filter snapshot
            page: Zero-based page index

        Returns:
            Page envelope with content and paging metadata
        """
        params = criteria.to_query_params(page)
        logger.info(f"Fetching FIR page {page}: {params}")
        data = await self._request_with_retry("GET", "/fir/paginated", params=params)
        result = _validate(FIRPage, data)
        logger.info(
            f"Fetched {len(result.content)} FIRs (total={result.total_elements}, has_next={result.has_next})"
        )
        return result

    async def update_status(self, fir_id: int, request: StatusUpdateRequest) -> FIRRecord:
        """
        Update a FIR's status.

        Returns:
            The canonical record after the update
        """
        payload = request.to_payload()
        logger.info(f"Updating FIR {fir_id}: {payload}")
        data = await self._request_with_retry("PATCH", f"/fir/{fir_id}/status", json=payload)
        return _validate(FIRRecord, data)

    async def get_fir(self, fir_id: int) -> FIRRecord:
        """Fetch a single FIR by id."""
        data = await self._request_with_retry("GET", f"/fir/{fir_id}")
        return _validate(FIRRecord, data)

    async def get_fir_by_number(self, fir_number: str) -> FIRRecord:
        """Fetch a single FIR by its case number."""
        data = await self._request_with_retry("GET", f"/fir/number/{fir_number}")
        return _validate(FIRRecord, data)


def _token_headers() -> dict[str, str]:
    """Default header provider using the configured bearer token, if any."""
    if settings.api_token:
        return {"Authorization": f"Bearer {settings.api_token}"}
    return {}


def _validate(model, data: Any):
    """Parse a response body, mapping schema errors to ``FIRClientError``."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise FIRClientError(f"Unexpected response shape: {e}") from e
