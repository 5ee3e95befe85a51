"""
Sensor Data API Router
======================

The read side. The dashboard pulls readings from here.

ALL ENDPOINTS:
-------------
GET  /api/sensor-data          - Readings, newest first (startDate, endDate, limit)
GET  /api/sensor-data/latest   - The most recent reading(s) (limit, default 1)
POST /api/sensor-data          - Store one reading sent as JSON

Every record we return also gets:
- timestamp: recTime as an RFC 3339 string
- tags: "high-temperature" (> 25 °C), "low-temperature" (< 18 °C), "high-co2" (> 1000 ppm)

Author: Sensor Data Collector Team
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.models import IngestResponse, SensorDataRecord, SensorReadingForm
from app.routers.ingest import get_sensor_store, store_reading
from app.services.sensor_store import SensorStore, StorageError, StorageUnavailableError
from app.utils.metrics import derive_tags
from app.utils.validation import parse_date_bound, parse_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sensor-data", tags=["sensor-data"])


# Same defaults the dashboard has always relied on
DEFAULT_LIMIT = 15000
DEFAULT_LATEST_LIMIT = 1


def format_timestamp(rec_time: datetime) -> str:
    """recTime is stored as naive UTC; render it as RFC 3339."""
    if rec_time.tzinfo is None:
        rec_time = rec_time.replace(tzinfo=timezone.utc)
    return rec_time.isoformat()


def to_record(row: dict) -> dict:
    """Add the derived timestamp and tags to a stored row."""
    record = dict(row)
    record["timestamp"] = format_timestamp(row["recTime"])
    record["tags"] = derive_tags(row["temp"], row["CO2"])
    return record


def load_records(
    store: SensorStore,
    limit: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> list[dict]:
    """Query the store and turn storage failures into HTTP errors."""
    try:
        rows = store.fetch_readings(limit=limit, start=start, end=end)
    except StorageUnavailableError:
        logger.exception("Database unavailable while fetching sensor data")
        raise HTTPException(status_code=503, detail="Storage unavailable")
    except StorageError:
        logger.exception("Error fetching sensor data")
        raise HTTPException(status_code=500, detail="Failed to fetch sensor data")

    return [to_record(row) for row in rows]


# =============================================================================
# READ ENDPOINTS
# =============================================================================

@router.get("", response_model=list[SensorDataRecord])
def get_sensor_data(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    limit: Optional[str] = Query(None),
    store: SensorStore = Depends(get_sensor_store)
):
    """
    Get readings, newest first.

    Optional filters:
    - startDate / endDate: ISO date or datetime, both inclusive
    - limit: Max rows (default 15000; anything that isn't a positive number uses the default)
    """
    try:
        start = parse_date_bound(start_date)
        end = parse_date_bound(end_date)
    except ValueError:
        raise HTTPException(status_code=422, detail="startDate/endDate must be ISO-8601 dates")

    row_limit = parse_limit(limit, DEFAULT_LIMIT)
    logger.info(f"Fetching data with range: {start_date} to {end_date}, limit: {row_limit}")

    records = load_records(store, row_limit, start, end)
    logger.info(f"Returned {len(records)} records")
    return records


@router.get("/latest", response_model=list[SensorDataRecord])
def get_latest_sensor_data(
    limit: Optional[str] = Query(None),
    store: SensorStore = Depends(get_sensor_store)
):
    """Get the most recent reading (or the last `limit` readings)."""
    return load_records(store, parse_limit(limit, DEFAULT_LATEST_LIMIT))


# =============================================================================
# WRITE ENDPOINT
# =============================================================================

@router.post("", status_code=201, response_model=IngestResponse)
def post_sensor_data(
    reading: SensorReadingForm,
    store: SensorStore = Depends(get_sensor_store)
):
    """
    Store one reading sent as JSON.

    Same fields, validation and errors as POST /api/ingest.
    """
    return store_reading(reading, store)
