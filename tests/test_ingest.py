from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models import READING_COLUMNS
from app.routers import set_sensor_store
from app.services import SensorStore


def test_ingest_stores_one_row_with_derived_indoor_td(client: TestClient, store: SensorStore, valid_reading) -> None:
    response = client.post("/api/ingest", data=valid_reading)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "ok"
    assert store.count_readings() == 1

    [row] = store.fetch_readings(limit=10)
    assert row["id"] == body["id"]
    assert row["location"] == "3"
    assert row["temp"] == pytest.approx(21.5)
    assert row["rH"] == pytest.approx(40.0)
    assert row["indoorTd"] == pytest.approx(21.5 - ((100 - 40) / 5))
    assert row["recTime"] is not None


def test_ingest_ignores_caller_supplied_indoor_td(client: TestClient, store: SensorStore, valid_reading) -> None:
    response = client.post("/api/ingest", data={**valid_reading, "indoorTd": "999"})

    assert response.status_code == 201
    [row] = store.fetch_readings(limit=1)
    assert row["indoorTd"] == pytest.approx(9.5)


def test_legacy_firmware_path_is_accepted(client: TestClient, store: SensorStore, valid_reading) -> None:
    response = client.post("/dataToDB.php", data=valid_reading)

    assert response.status_code == 201
    assert store.count_readings() == 1


@pytest.mark.parametrize("missing", ["location", *READING_COLUMNS])
def test_missing_field_is_rejected_without_write(
    client: TestClient, store: SensorStore, valid_reading, missing: str
) -> None:
    del valid_reading[missing]

    response = client.post("/api/ingest", data=valid_reading)

    assert response.status_code == 422
    assert store.count_readings() == 0


@pytest.mark.parametrize("rh", ["-0.1", "100.5", "250"])
def test_humidity_out_of_range_is_rejected(client: TestClient, store: SensorStore, valid_reading, rh: str) -> None:
    response = client.post("/api/ingest", data={**valid_reading, "rH": rh})

    assert response.status_code == 422
    assert store.count_readings() == 0


@pytest.mark.parametrize("rh", ["0", "100"])
def test_humidity_bounds_are_inclusive(client: TestClient, store: SensorStore, valid_reading, rh: str) -> None:
    response = client.post("/api/ingest", data={**valid_reading, "rH": rh})

    assert response.status_code == 201
    assert store.count_readings() == 1


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("temp", "abc"),
        ("temp", "nan"),
        ("temp", "1_000"),
        ("rH", "0x10"),
        ("CO2", "1e400"),
        ("CO2", "inf"),
        ("HCHO", ""),
        ("location", ""),
        ("location", "   "),
        ("location", "x" * 65),
    ],
)
def test_malformed_field_is_rejected(
    client: TestClient, store: SensorStore, valid_reading, field: str, value: str
) -> None:
    response = client.post("/api/ingest", data={**valid_reading, field: value})

    assert response.status_code == 422
    assert store.count_readings() == 0


def test_sql_metacharacters_in_location_are_stored_as_data(
    client: TestClient, store: SensorStore, valid_reading
) -> None:
    location = "O'Brien'; DROP TABLE IAQ;--"
    client.post("/api/ingest", data=valid_reading)

    response = client.post("/api/ingest", data={**valid_reading, "location": location})

    assert response.status_code == 201
    rows = store.fetch_readings(limit=10)
    assert len(rows) == 2
    assert rows[0]["location"] == location
    assert rows[1]["location"] == "3"


def test_unreachable_database_returns_generic_503(tmp_path, valid_reading) -> None:
    # The parent directory doesn't exist, so sqlite can't open the file
    db_path = tmp_path / "missing" / "secret-name.db"
    broken = SensorStore.from_url(f"sqlite:///{db_path}")
    set_sensor_store(broken)
    try:
        response = TestClient(app).post("/api/ingest", data=valid_reading)
    finally:
        set_sensor_store(None)
        broken.dispose()

    assert response.status_code == 503
    assert response.json() == {"detail": "Storage unavailable"}
    assert "secret-name" not in response.text


def test_failed_insert_returns_generic_500(tmp_path, valid_reading) -> None:
    # Connects fine, but the IAQ table was never created
    no_table = SensorStore.from_url(f"sqlite:///{tmp_path / 'empty.db'}")
    set_sensor_store(no_table)
    try:
        response = TestClient(app).post("/api/ingest", data=valid_reading)
    finally:
        set_sensor_store(None)
        no_table.dispose()

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to store sensor reading"}
    assert "IAQ" not in response.text
