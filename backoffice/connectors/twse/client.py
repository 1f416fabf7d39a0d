"""Backoffice — Exchange Open API Client.

Fetches the full STOCK_DAY_ALL snapshot (one unauthenticated GET, no paging).
Every failure mode surfaces as `TwseAPIError` so the ingester has a single
thing to catch.
"""

from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from backoffice.config import settings
from backoffice.models.stock_models import StockDayRecord
from backoffice.core.logging import get_logger

logger = get_logger("twse.client")

STOCK_DAY_ALL_PATH = "/exchangeReport/STOCK_DAY_ALL"


class TwseAPIError(Exception):
    """Raised when the exchange feed cannot be fetched or decoded."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class TwseClient:
    """Async HTTP client for the exchange open API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.twse_base_url).rstrip("/")
        self.timeout = timeout or settings.twse_timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_json(self, url: str) -> Any:
        client = await self._get_client()
        try:
            resp = await client.get(url, headers={"Accept": "application/json"})
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            raise TwseAPIError(
                f"Feed returned HTTP {e.response.status_code}", e.response.status_code
            ) from e
        except httpx.RequestError as e:
            raise TwseAPIError(f"Feed request failed: {e}") from e
        except ValueError as e:
            raise TwseAPIError(f"Feed body is not valid JSON: {e}") from e

    async def fetch_stock_day_all(self) -> List[StockDayRecord]:
        """Fetch today's trading summary for every listed security."""
        url = f"{self.base_url}{STOCK_DAY_ALL_PATH}"
        payload = await self._get_json(url)

        if not isinstance(payload, list):
            raise TwseAPIError(
                f"Expected a JSON array from {STOCK_DAY_ALL_PATH}, got {type(payload).__name__}"
            )
        try:
            records = [StockDayRecord.model_validate(item) for item in payload]
        except ValidationError as e:
            raise TwseAPIError(f"Unexpected record shape: {e}") from e

        logger.info(f"Fetched {len(records)} records from {url}")
        return records
