"""
Sensor API Client
=================

Fetches readings from the sensor API and hands back normalized records.

The dashboard is deployed as a static site, so the API location is just a
base URL (no secrets). Every route lives under /api/:

    get_api_url("sensor-data")         -> http://localhost:8080/api/sensor-data
    get_api_url("/sensor-data/latest") -> http://localhost:8080/api/sensor-data/latest

Author: Sensor Data Collector Team
"""

import logging
from typing import Optional

import httpx

from app.services.normalization import NormalizedSensorData, normalize_records

logger = logging.getLogger(__name__)


DEFAULT_API_BASE_URL = "http://localhost:8080"


class SensorApiError(Exception):
    """The API answered, but not with a list of records."""


def get_api_url(endpoint: str, base_url: str = DEFAULT_API_BASE_URL) -> str:
    """
    Build the full URL for an API endpoint.

    Args:
        endpoint: Path below /api/, with or without a leading slash
        base_url: Where the API server lives

    Returns:
        "<base_url>/api/<endpoint>"
    """
    # Avoid double slashes on either side of /api/
    clean_endpoint = endpoint[1:] if endpoint.startswith("/") else endpoint
    url = f"{base_url.rstrip('/')}/api/{clean_endpoint}"
    logger.debug(f"API URL: {url}")
    return url


class SensorApiClient:
    """
    Async client for the sensor data API.

    HOW TO USE:
    ----------
    async with SensorApiClient("http://localhost:8080") as client:
        records = await client.fetch_sensor_data(start_date="2025-03-01")
        latest = await client.fetch_latest()

    Every record comes back normalized (numbers are floats). A record with a
    broken value raises NormalizationError.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        request_timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Set up the client.

        Args:
            base_url: Where the API server lives
            request_timeout: How long to wait for a response (seconds)
            http_client: Bring your own httpx client (tests use a mock transport)
        """
        self.base_url = base_url
        self.http_client = http_client or httpx.AsyncClient(timeout=request_timeout)

    async def __aenter__(self) -> "SensorApiClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _get_records(self, endpoint: str, params: dict) -> list[NormalizedSensorData]:
        response = await self.http_client.get(get_api_url(endpoint, self.base_url), params=params)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise SensorApiError(f"Expected a list of records from {endpoint}, got {type(payload).__name__}")

        return normalize_records(payload)

    async def fetch_sensor_data(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[int] = None
    ) -> list[NormalizedSensorData]:
        """
        Get readings, newest first.

        Args:
            start_date: ISO date/datetime lower bound (inclusive)
            end_date: ISO date/datetime upper bound (inclusive)
            limit: Maximum number of records (server default if omitted)
        """
        params = {}
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date
        if limit is not None:
            params["limit"] = limit

        records = await self._get_records("sensor-data", params)
        logger.info(f"Fetched {len(records)} records")
        return records

    async def fetch_latest(self, limit: int = 1) -> list[NormalizedSensorData]:
        """Get the most recent reading(s)."""
        return await self._get_records("sensor-data/latest", {"limit": limit})

    async def close(self):
        """Close the HTTP client."""
        await self.http_client.aclose()
