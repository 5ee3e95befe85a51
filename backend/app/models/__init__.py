"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from app.models import SensorReadingForm, iaq_table
"""

from .reading import (
    # What the device sends us
    SensorReadingForm,

    # What we send back
    IngestResponse,
    SensorDataRecord,
)
from .iaq import (
    # The database table
    metadata,
    iaq_table,
    READING_COLUMNS,
)

__all__ = [
    "SensorReadingForm",
    "IngestResponse",
    "SensorDataRecord",
    "metadata",
    "iaq_table",
    "READING_COLUMNS",
]
