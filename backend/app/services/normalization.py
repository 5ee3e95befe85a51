"""
Normalization
=============

Records coming back from the sensor API aren't consistently typed. Depending
on the database driver and column types, a value like temp can show up as
21.5 or as "21.5". The dashboard wants numbers, always.

This module turns a raw record into one where every measurement is a float:

    {"id": 7, "temp": "21.5", "rH": 40, "recTime": "...", ...}
            |
            v
    {"id": 7, "temp": 21.5, "rH": 40.0, "recTime": "...", ...}

Nothing is dropped or renamed. A value that can't be a finite number is a
data problem, so it raises NormalizationError instead of turning into 0.

Author: Sensor Data Collector Team
"""

from typing import Any, Iterable, Mapping

from app.utils.validation import parse_measurement


# Every field that must come out as a number
MEASUREMENT_FIELDS = frozenset({
    "temp",
    "rH",
    "VOC",
    "NOx",
    "pmass1",
    "pmass25",
    "pmass4",
    "pmass10",
    "pcount1",
    "pcount25",
    "pcount4",
    "pcount10",
    "typPartSize",
    "HCHO",
    "CO2",
    "indoorTd",
})

# A normalized record is a plain dict with float measurements
NormalizedSensorData = dict[str, Any]


class NormalizationError(ValueError):
    """A stored measurement is not a finite number."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Field {field!r} is not a finite number: {value!r}")


def normalize_value(field: str, value: Any) -> float:
    """
    Coerce one measurement to float.

    Args:
        field: Field name (used in the error)
        value: int, float, Decimal, or a decimal string like "21.5"

    Returns:
        The value as a float

    Raises:
        NormalizationError: None, bool, NaN/Infinity, or an unparsable string
    """
    try:
        return parse_measurement(value)
    except ValueError:
        raise NormalizationError(field, value) from None


def normalize_record(raw: Mapping[str, Any]) -> NormalizedSensorData:
    """
    Normalize a single record from the sensor API.

    Measurement fields are coerced to float; everything else (id, location,
    recTime, timestamp, tags, ...) is passed through untouched.
    """
    return {
        key: normalize_value(key, value) if key in MEASUREMENT_FIELDS else value
        for key, value in raw.items()
    }


def normalize_records(records: Iterable[Mapping[str, Any]]) -> list[NormalizedSensorData]:
    """Normalize a batch. The first bad record raises."""
    return [normalize_record(record) for record in records]
