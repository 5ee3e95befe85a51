from __future__ import annotations

import math
from decimal import Decimal

import pytest

from app.services.normalization import (
    NormalizationError,
    normalize_record,
    normalize_records,
    normalize_value,
)


def _raw_record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "id": 42,
        "location": "3",
        "recTime": "2025-03-01T12:00:00Z",
        "timestamp": "2025-03-01T12:00:00+00:00",
        "temp": "21.5",
        "rH": 40,
        "VOC": 101.0,
        "NOx": "1",
        "pmass1": 1.2,
        "pmass25": 2.3,
        "pmass4": 2.9,
        "pmass10": 3.1,
        "HCHO": "12.25",
        "CO2": 640,
        "indoorTd": "9.5",
    }
    record.update(overrides)
    return record


def test_string_measurement_becomes_float() -> None:
    assert normalize_record(_raw_record(temp="21.5"))["temp"] == 21.5


def test_numeric_measurement_passes_through() -> None:
    normalized = normalize_record(_raw_record(temp=21.5))

    assert normalized["temp"] == 21.5
    assert isinstance(normalized["rH"], float)
    assert normalized["CO2"] == 640.0


def test_field_set_and_order_are_preserved() -> None:
    raw = _raw_record(tags=["high-co2"], extra="kept")

    normalized = normalize_record(raw)

    assert list(normalized) == list(raw)
    assert normalized["id"] == 42
    assert normalized["location"] == "3"
    assert normalized["recTime"] == raw["recTime"]
    assert normalized["timestamp"] == raw["timestamp"]
    assert normalized["tags"] == ["high-co2"]
    assert normalized["extra"] == "kept"


def test_decimal_measurement_passes_through_as_float() -> None:
    normalized = normalize_record(_raw_record(temp=Decimal("21.5")))

    assert normalized["temp"] == 21.5
    assert isinstance(normalized["temp"], float)


def test_string_with_surrounding_whitespace_parses() -> None:
    assert normalize_value("HCHO", " 12.5 ") == 12.5


@pytest.mark.parametrize(
    "bad",
    ["abc", "", "1_000", "nan", "inf", "12,5", None, True, math.nan, math.inf, [1], 10**400, Decimal("NaN"), Decimal("1e400")],
)
def test_bad_measurement_raises(bad: object) -> None:
    with pytest.raises(NormalizationError) as exc_info:
        normalize_record(_raw_record(NOx=bad))

    assert exc_info.value.field == "NOx"
    assert exc_info.value.value is bad or exc_info.value.value == bad


def test_normalization_error_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="NOx"):
        normalize_value("NOx", "abc")


def test_batch_fails_on_first_bad_record() -> None:
    with pytest.raises(NormalizationError):
        normalize_records([_raw_record(), _raw_record(temp="warm")])


def test_batch_normalizes_every_record() -> None:
    normalized = normalize_records([_raw_record(), _raw_record(id=43, temp=19)])

    assert [record["temp"] for record in normalized] == [21.5, 19.0]
