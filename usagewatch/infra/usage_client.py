"""Usage API client using httpx."""

from __future__ import annotations

import logging
import time

import httpx

from usagewatch.config import DEFAULT_API_URL
from usagewatch.models.usage import TimeRange

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "https://cursor.com"
DEFAULT_PAGE_SIZE = 100
USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"


class UsageApiError(Exception):
    """Base class for failures talking to the usage API."""


class NetworkFailure(UsageApiError):
    """Transport error, timeout, or a non-2xx response."""


class MalformedResponse(UsageApiError):
    """The response body was not the JSON shape we expect."""


class UsageClient:
    """Queries the usage API for the raw events of a time window."""

    def __init__(
        self,
        url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = httpx.AsyncClient(
            headers={
                "accept": "*/*",
                "content-type": "application/json",
                "origin": DEFAULT_ORIGIN,
                "referer": f"{DEFAULT_ORIGIN}/dashboard?tab=usage",
                "user-agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    @staticmethod
    def build_query(time_range: TimeRange, now_ms: int | None = None) -> dict:
        """Build the request body for a lookback window ending at *now_ms*."""
        end = now_ms if now_ms is not None else int(time.time() * 1000)
        start = end - time_range.milliseconds
        return {
            "teamId": 0,
            "startDate": str(start),
            "endDate": str(end),
            "page": 1,
            "pageSize": DEFAULT_PAGE_SIZE,
        }

    async def fetch_records(
        self,
        credential: str,
        time_range: TimeRange = TimeRange.LAST_24H,
        now_ms: int | None = None,
    ) -> list:
        """Fetch the raw usage records for the window.

        Raises:
            NetworkFailure: the request failed or returned a non-2xx status.
            MalformedResponse: the body is not a JSON object with a list of
                records.
        """
        payload = self.build_query(time_range, now_ms)

        logger.debug("Fetching usage events (%s)", time_range.value)
        try:
            response = await self._client.post(
                self._url, json=payload, headers={"Cookie": credential}
            )
            logger.debug("Usage API response status: %s", response.status_code)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NetworkFailure(str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse("Response is not valid JSON") from e

        if not isinstance(data, dict):
            raise MalformedResponse(f"Expected a JSON object, got {type(data).__name__}")

        records = data.get("usageEventsDisplay")
        if records is None:
            return []
        if not isinstance(records, list):
            raise MalformedResponse(
                f"usageEventsDisplay is {type(records).__name__}, expected a list"
            )
        logger.debug("Received %d usage records", len(records))
        return records

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
