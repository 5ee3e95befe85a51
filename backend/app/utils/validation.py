"""
Input Validation Utilities
===========================

Common validation functions for sensor readings and query parameters.

Author: Frank Kusi Appiah
"""

import math
import numbers
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional


# Plain decimal notation: "21.5", "-3", ".5", "1e3". No underscores, no "nan".
DECIMAL_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


def validate_relative_humidity(value: float) -> bool:
    """
    Validate a relative humidity value.

    Args:
        value: Relative humidity in %

    Returns:
        True if 0 <= value <= 100, False otherwise
    """
    return 0.0 <= value <= 100.0


def is_finite_number(value) -> bool:
    """
    Check that a value is a real number and not NaN or Infinity.

    int, float and Decimal (what database drivers hand back for DECIMAL
    columns) all count. bool is rejected even though it subclasses int -
    True is not a reading. Anything too big to fit in a float is rejected too.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite() and math.isfinite(float(value))
    if not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def parse_decimal(text: str) -> Optional[float]:
    """
    Parse a decimal number string.

    Args:
        text: String like "21.5" (surrounding whitespace is ignored)

    Returns:
        The finite float, or None if the string is not a plain decimal
    """
    text = text.strip()
    if not DECIMAL_PATTERN.match(text):
        return None
    result = float(text)
    return result if math.isfinite(result) else None


def parse_measurement(value) -> float:
    """
    Turn one measurement into a float - the single rule for what counts as a number.

    Used when a reading comes in (SensorReadingForm) and when records are
    read back (normalization), so both sides agree.

    Args:
        value: A finite int/float/Decimal, or a plain decimal string like "21.5"

    Returns:
        The value as a float

    Raises:
        ValueError: bool, None, NaN/Infinity, "1_000", "0x10", "", ...
    """
    if isinstance(value, str):
        parsed = parse_decimal(value)
        if parsed is None:
            raise ValueError("must be a decimal number")
        return parsed

    if not is_finite_number(value):
        raise ValueError("must be a finite number")
    return float(value)


def parse_date_bound(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a startDate/endDate query parameter.

    Accepts an ISO-8601 date ("2025-03-01") or datetime
    ("2025-03-01T12:00:00Z"). Aware datetimes are converted to naive UTC,
    which is how recTime is stored.

    Raises:
        ValueError: If the value isn't a valid ISO-8601 date/datetime
    """
    if value is None or not value.strip():
        return None
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_limit(value: Optional[str], default: int) -> int:
    """
    Parse a limit query parameter.

    Anything that isn't a positive integer falls back to the default.
    """
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default
