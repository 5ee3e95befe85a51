"""
Utility modules for the sensor data collector backend.
"""

from app.utils.validation import (
    validate_relative_humidity,
    is_finite_number,
    parse_decimal,
    parse_measurement,
    parse_date_bound,
    parse_limit,
)
from app.utils.metrics import compute_indoor_td, derive_tags

__all__ = [
    "validate_relative_humidity",
    "is_finite_number",
    "parse_decimal",
    "parse_measurement",
    "parse_date_bound",
    "parse_limit",
    "compute_indoor_td",
    "derive_tags",
]
