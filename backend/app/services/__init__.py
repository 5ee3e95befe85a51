"""
Services Package
================

These are the "workers" that do the actual work.

- SensorStore: Reads and writes readings in the database
- normalization: Turns loosely-typed API records into numbers
- SensorApiClient: Fetches readings from the sensor API
"""

from .sensor_store import (
    SensorStore,
    StorageError,
    StorageUnavailableError,
    StorageWriteError,
    StorageReadError,
)
from .normalization import NormalizationError, normalize_record, normalize_records
from .sensor_api_client import SensorApiClient, SensorApiError, get_api_url

__all__ = [
    "SensorStore",
    "StorageError",
    "StorageUnavailableError",
    "StorageWriteError",
    "StorageReadError",
    "NormalizationError",
    "normalize_record",
    "normalize_records",
    "SensorApiClient",
    "SensorApiError",
    "get_api_url",
]
