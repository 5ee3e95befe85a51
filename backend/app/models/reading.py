"""
Sensor Reading Models
=====================
Pydantic models for IAQ sensor readings.

This module defines the data structures that cross the HTTP boundary:
- Request models: What the Arduino (or any client) posts to the backend
- Response models: What the backend returns from the query API

Every field the device sends is untrusted. Parsing a request into
SensorReadingForm IS the validation step - if it parses, it is safe to store.

FIELDS SENT BY THE DEVICE (all required):
    location, temp, rH,
    pmass1, pmass25, pmass4, pmass10,
    pcount1, pcount25, pcount4, pcount10,
    typPartSize, HCHO, CO2

Author: Sensor Data Collector Team
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from app.utils.validation import parse_measurement, validate_relative_humidity


# A finite number, or a plain decimal string. Rejects true/false, "1_000", "nan".
Measurement = Annotated[float, BeforeValidator(parse_measurement)]


# =============================================================================
# REQUEST MODELS - What the device sends to the backend
# =============================================================================

class SensorReadingForm(BaseModel):
    """
    One reading from an IAQ sensor unit.

    Sent as a form POST by the device firmware, or as JSON by other clients.
    Numbers may arrive as strings on the wire ("21.5"); parse_measurement parses them.
    NaN and Infinity are rejected - they would poison indoorTd and the charts.

    Example Request:
        POST /api/ingest
        location=3&temp=21.5&rH=40&pmass1=1.2&pmass25=2.3&pmass4=2.9
        &pmass10=3.1&pcount1=10&pcount25=12&pcount4=12.5&pcount10=12.6
        &typPartSize=0.6&HCHO=12&CO2=640
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    location: str = Field(
        ...,
        description="Identifier of the physical sensor unit",
        min_length=1,
        max_length=64,
        examples=["3", "Room 201"]
    )
    temp: Measurement = Field(..., description="Temperature in °C")
    rH: Measurement = Field(..., description="Relative humidity % (0-100)")

    # Particulate mass concentration by size bin (µg/m³)
    pmass1: Measurement = Field(..., description="PM1.0 mass µg/m³")
    pmass25: Measurement = Field(..., description="PM2.5 mass µg/m³")
    pmass4: Measurement = Field(..., description="PM4.0 mass µg/m³")
    pmass10: Measurement = Field(..., description="PM10 mass µg/m³")

    # Particle number concentration by size bin
    pcount1: Measurement = Field(..., description="PM1.0 particle count")
    pcount25: Measurement = Field(..., description="PM2.5 particle count")
    pcount4: Measurement = Field(..., description="PM4.0 particle count")
    pcount10: Measurement = Field(..., description="PM10 particle count")

    typPartSize: Measurement = Field(..., description="Typical particle size µm")
    HCHO: Measurement = Field(..., description="Formaldehyde in ppb")
    CO2: Measurement = Field(..., description="Carbon dioxide in ppm")

    @field_validator("rH")
    @classmethod
    def check_relative_humidity(cls, value: float) -> float:
        """Humidity outside 0-100 % means a broken sensor, not a reading."""
        if not validate_relative_humidity(value):
            raise ValueError("rH must be between 0 and 100")
        return value


# =============================================================================
# RESPONSE MODELS - What the backend returns
# =============================================================================

class IngestResponse(BaseModel):
    """Acknowledgement returned after a reading has been stored."""
    status: str = Field(default="ok")
    id: int = Field(..., description="Store-assigned row id")


class SensorDataRecord(BaseModel):
    """
    One stored reading as returned by GET /api/sensor-data.

    Time fields:
        recTime: when the row was received and stored (assigned by the database)
        timestamp: the same instant as an RFC 3339 string, for the dashboard

    tags are derived from the values on every query, they are not stored.
    """
    id: int
    location: str
    recTime: datetime
    timestamp: str
    temp: float
    rH: float
    pmass1: float
    pmass25: float
    pmass4: float
    pmass10: float
    pcount1: float
    pcount25: float
    pcount4: float
    pcount10: float
    typPartSize: float
    HCHO: float
    CO2: float
    indoorTd: float
    tags: list[str] = Field(default_factory=list)
