"""
Ingestion Router
================

This is the door the sensor units knock on.

The Arduino wakes up, takes a reading, and POSTs it as a form:

    POST /api/ingest
    location=3&temp=21.5&rH=40&pmass1=1.2&...&HCHO=12&CO2=640

Older firmware posts the same form to /dataToDB.php, so that path is kept.

WHAT HAPPENS:
------------
1. FastAPI parses the form into a SensorReadingForm
   - missing field / not a number / rH outside 0-100  ->  422, nothing stored
2. The store computes indoorTd and inserts ONE row
3. We answer 201 with the new row id

IF THE DATABASE IS DOWN:
-----------------------
We answer 503 (can't connect) or 500 (insert failed) with a short message.
We do NOT retry - the device is responsible for sending the reading again.

Author: Sensor Data Collector Team
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException

from app.models import IngestResponse, SensorReadingForm
from app.services.sensor_store import SensorStore, StorageError, StorageUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ingest"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

_sensor_store = None  # This gets set when the app starts


def set_sensor_store(store: SensorStore):
    """Called when the app starts to give the routers the store."""
    global _sensor_store
    _sensor_store = store


def get_sensor_store() -> SensorStore:
    """Get the store for use in endpoints."""
    if _sensor_store is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return _sensor_store


def store_reading(reading: SensorReadingForm, store: SensorStore) -> IngestResponse:
    """
    Insert a reading and turn storage failures into HTTP errors.

    Shared by the form endpoint and the JSON endpoint in sensor_data.
    The real error goes to the log; the caller only gets a generic message.
    """
    try:
        new_id = store.insert_reading(reading)
    except StorageUnavailableError:
        logger.exception(f"[{reading.location}] Database unavailable, reading rejected")
        raise HTTPException(status_code=503, detail="Storage unavailable")
    except StorageError:
        logger.exception(f"[{reading.location}] Insert failed, reading rejected")
        raise HTTPException(status_code=500, detail="Failed to store sensor reading")

    return IngestResponse(id=new_id)


# =============================================================================
# INGEST ENDPOINT
# =============================================================================

@router.post("/api/ingest", status_code=201, response_model=IngestResponse)
@router.post("/dataToDB.php", status_code=201, response_model=IngestResponse, include_in_schema=False)
def ingest_reading(
    reading: Annotated[SensorReadingForm, Form()],
    store: SensorStore = Depends(get_sensor_store)
):
    """
    Store one reading from a sensor unit.

    Send us (form-encoded, all required):
    - location: Which sensor unit this is
    - temp, rH: Temperature (°C) and relative humidity (0-100 %)
    - pmass1, pmass25, pmass4, pmass10: Particulate mass (µg/m³)
    - pcount1, pcount25, pcount4, pcount10: Particle counts
    - typPartSize, HCHO, CO2

    indoorTd is computed here - don't send it.
    """
    return store_reading(reading, store)
