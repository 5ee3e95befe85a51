"""
IAQ Sensor Backend - API
========================
FastAPI application that receives indoor air quality readings from sensor
units and serves them back to the dashboard.

ARCHITECTURE:

    [Arduino sensor unit] --form POST--> [This Backend] --INSERT--> [MySQL: IAQ table]
                                               |
                                               | GET /api/sensor-data
                                               v
                                     [Static dashboard]

WHAT THE DEVICE SENDS:
    location, temp, rH, pmass1/25/4/10, pcount1/25/4/10, typPartSize, HCHO, CO2
    The backend adds indoorTd (approximate dew point) before storing.

HOW TO RUN:
    # Install
    pip install -e .

    # Configure (or put these in a .env file)
    export MYSQL_USER=data MYSQL_PASS=... MYSQL_HOST=localhost MYSQL_DB=buildingData
    # ...or point at any SQLAlchemy URL:
    export DATABASE_URL=sqlite:///iaq.db CREATE_TABLES=true

    # Run the server
    uvicorn app.main:app --app-dir backend --port 8080

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:8080/docs
    - ReDoc: http://localhost:8080/redoc

Author: Sensor Data Collector Team
"""

import logging
import os
import sys
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import URL

from app.routers import get_sensor_store, ingest_router, sensor_data_router, set_sensor_store
from app.services import SensorStore, StorageError


# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

DEFAULT_MYSQL_PORT = 3306


def build_database_url() -> str | URL:
    """
    Work out which database to use.

    DATABASE_URL wins if it is set. Otherwise a MySQL URL is built from the
    MYSQL_* variables. URL.create keeps the password out of log output.
    """
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    port_str = os.getenv("MYSQL_PORT", str(DEFAULT_MYSQL_PORT))
    try:
        port = int(port_str)
    except ValueError:
        logger.warning(f"Invalid MYSQL_PORT {port_str!r}, using default port {DEFAULT_MYSQL_PORT}")
        port = DEFAULT_MYSQL_PORT

    return URL.create(
        "mysql+pymysql",
        username=os.getenv("MYSQL_USER", "data"),
        password=os.getenv("MYSQL_PASS") or None,
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=port,
        database=os.getenv("MYSQL_DB", "buildingData"),
    )


class Config:
    """
    Application configuration loaded from environment variables.

    Environment Variables:
        DATABASE_URL: Full SQLAlchemy URL (overrides MYSQL_*)
        MYSQL_USER, MYSQL_PASS, MYSQL_HOST, MYSQL_PORT, MYSQL_DB: MySQL connection
        CREATE_TABLES: Create the IAQ table at startup (default: false)
        API_BASE_URL: Where the dashboard finds this API (default: http://localhost:8080)
        FRONTEND_URL: URL of the dashboard for CORS
        LOG_LEVEL: Logging level (default: INFO)

    Times are UTC end to end: MySQL sessions are pinned to +00:00, so recTime
    (CURRENT_TIMESTAMP) is stored in UTC and served with a +00:00 offset.
    """

    DATABASE_URL = build_database_url()

    # Only for local/dev databases - production tables are managed by hand
    CREATE_TABLES = os.getenv("CREATE_TABLES", "false").lower() in ("1", "true", "yes")

    # Base URL of this API as seen by the dashboard
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080")

    # Frontend URL for CORS
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Allowed CORS origins
    CORS_ORIGINS = [
        FRONTEND_URL,
        "http://localhost:5173",    # Vite dev server
        "http://127.0.0.1:5173",
    ]


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        1. Create the SensorStore (connection pool)
        2. Create the IAQ table if CREATE_TABLES is on
        3. Inject the store into the routers

    SHUTDOWN:
        1. Close every pooled connection
    """
    # ========== STARTUP ==========
    print("=" * 60)
    print("IAQ SENSOR BACKEND - Starting")
    print("=" * 60)

    store = SensorStore.from_url(Config.DATABASE_URL)

    if Config.CREATE_TABLES:
        try:
            store.create_schema()
            logger.info("IAQ table ready")
        except StorageError:
            # Keep serving; requests get 503 until the database is back
            logger.exception("Could not create the IAQ table")

    set_sensor_store(store)

    print(f"   Database: {store.engine.url!r}")
    print(f"   CORS origins: {len(Config.CORS_ORIGINS)} configured")
    print(f"   API base URL: {Config.API_BASE_URL}")
    print("=" * 60)

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    print()
    print("Shutting down...")
    store.dispose()
    print("Shutdown complete")


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

app = FastAPI(
    title="IAQ Sensor API",
    description="""
## Overview

Receives indoor air quality readings from sensor units and serves them to the dashboard.

## Endpoints

| Endpoint | What it does |
|----------|--------------|
| `POST /api/ingest` | Store one reading (form-encoded, from the device) |
| `GET /api/sensor-data` | Readings, newest first (`startDate`, `endDate`, `limit`) |
| `GET /api/sensor-data/latest` | Most recent reading(s) |
| `POST /api/sensor-data` | Store one reading (JSON) |

## Errors

- `422` - a field is missing, not a number, or `rH` is outside 0-100. Nothing is stored.
- `503` - the database can't be reached. Send the reading again later.
- `500` - the database rejected the write. Nothing is stored.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

# Device ingestion endpoint
app.include_router(ingest_router)

# Dashboard query endpoints
app.include_router(sensor_data_router)


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get(
    "/",
    summary="API Information",
    description="Get basic API information and available endpoints."
)
async def root():
    """Root endpoint with API overview."""
    return {
        "name": "IAQ Sensor API",
        "version": "1.0.0",
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json"
        },
        "endpoints": {
            "ingest": "POST /api/ingest",
            "sensor_data": {
                "list": "GET /api/sensor-data",
                "latest": "GET /api/sensor-data/latest",
                "add": "POST /api/sensor-data"
            }
        }
    }


@app.get(
    "/health",
    summary="Health Check",
    description="Check if the backend is running and the database answers."
)
def health():
    """Health check endpoint."""
    database_ok = get_sensor_store().ping()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "ok" if database_ok else "unavailable"
    }
