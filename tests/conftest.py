from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers import set_sensor_store
from app.services import SensorStore

# As the firmware sends it: every value is a form string
VALID_READING = {
    "location": "3",
    "temp": "21.5",
    "rH": "40",
    "pmass1": "1.2",
    "pmass25": "2.3",
    "pmass4": "2.9",
    "pmass10": "3.1",
    "pcount1": "10.4",
    "pcount25": "12.1",
    "pcount4": "12.5",
    "pcount10": "12.6",
    "typPartSize": "0.61",
    "HCHO": "12",
    "CO2": "640",
}


@pytest.fixture
def valid_reading() -> dict[str, str]:
    return dict(VALID_READING)


@pytest.fixture
def store(tmp_path) -> Iterator[SensorStore]:
    sensor_store = SensorStore.from_url(f"sqlite:///{tmp_path / 'iaq.db'}")
    sensor_store.create_schema()
    yield sensor_store
    sensor_store.dispose()


@pytest.fixture
def client(store: SensorStore) -> Iterator[TestClient]:
    set_sensor_store(store)
    # No `with` block: the lifespan (which builds the real store) is not run
    yield TestClient(app)
    set_sensor_store(None)
