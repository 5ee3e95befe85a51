"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .ingest import router as ingest_router, set_sensor_store, get_sensor_store
from .sensor_data import router as sensor_data_router

__all__ = [
    "ingest_router",
    "sensor_data_router",
    "set_sensor_store",
    "get_sensor_store",
]
