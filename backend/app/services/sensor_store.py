"""
Sensor Store
============

This is where readings go to live - the IAQ table in the database.

WHAT IT DOES:
------------
1. Opens a connection from the pool for each call (and always gives it back)
2. Inserts one reading per call with bound parameters
3. Reads readings back for the query API

HOW A WRITE WORKS:
-----------------
    SensorReadingForm (already validated)
            |
            | + indoorTd computed here
            v
    [connection checked out from pool]  --fails--> StorageUnavailableError
            |
            | BEGIN; INSERT ... VALUES (?, ?, ...); COMMIT
            v
    [new row id]                         --fails--> StorageWriteError (rolled back)

No retries here. If the database is down the device tries again later.

Author: Sensor Data Collector Team
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, func, insert, select, text
from sqlalchemy.engine import Connection, Engine, URL, make_url
from sqlalchemy.exc import SQLAlchemyError

from app.models import SensorReadingForm, iaq_table, metadata
from app.utils.metrics import compute_indoor_td

logger = logging.getLogger(__name__)


# =============================================================================
# ERRORS
# =============================================================================

class StorageError(Exception):
    """Base class for database problems. Messages are safe to show callers."""


class StorageUnavailableError(StorageError):
    """Could not get a connection to the database."""


class StorageWriteError(StorageError):
    """Connected, but the insert failed. Nothing was written."""


class StorageReadError(StorageError):
    """Connected, but the query failed."""


# =============================================================================
# ENGINE
# =============================================================================

# Pool settings: up to 25 open connections, 5 kept warm, recycled every 5 min
POOL_SIZE = 5
MAX_OVERFLOW = 20
POOL_RECYCLE_SECONDS = 300


def set_utc_time_zone(dbapi_connection, connection_record):
    """
    Run every MySQL session in UTC.

    recTime defaults to CURRENT_TIMESTAMP, which MySQL evaluates in the session
    time zone. Pinning it to UTC keeps stored times UTC whatever the server's
    own time zone is.
    """
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("SET time_zone = '+00:00'")
    finally:
        cursor.close()


def create_store_engine(database_url: str | URL) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL.

    SQLite (tests, local dev) keeps the driver's default pool but allows
    connections to be used from the request threadpool. SQLite's
    CURRENT_TIMESTAMP is always UTC.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return create_engine(url, connect_args={"check_same_thread": False})

    engine = create_engine(
        url,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_recycle=POOL_RECYCLE_SECONDS,
        pool_pre_ping=True,
    )
    if url.get_backend_name() == "mysql":
        event.listen(engine, "connect", set_utc_time_zone)
    return engine


# =============================================================================
# THE STORE
# =============================================================================

class SensorStore:
    """
    Reads and writes rows in the IAQ table.

    HOW TO USE:
    ----------
    store = SensorStore.from_url("sqlite:///iaq.db")
    store.create_schema()

    new_id = store.insert_reading(reading)
    rows = store.fetch_readings(limit=100)

    store.dispose()
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str | URL) -> "SensorStore":
        return cls(create_store_engine(database_url))

    @contextmanager
    def _connect(self) -> Iterator[Connection]:
        """Check out a pooled connection; it is returned on every exit path."""
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as e:
            raise StorageUnavailableError("Storage unavailable") from e

        try:
            yield conn
        finally:
            conn.close()

    def create_schema(self):
        """Create the IAQ table if it doesn't exist yet."""
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageUnavailableError("Storage unavailable") from e

    def insert_reading(self, reading: SensorReadingForm) -> int:
        """
        Store one reading.

        The insert runs in its own transaction: committed when it succeeds,
        rolled back on any error (including the caller going away mid-request),
        so a half-written row is never visible.

        Args:
            reading: A validated reading from the device

        Returns:
            The new row's id

        Raises:
            StorageUnavailableError: No database connection
            StorageWriteError: The insert failed (nothing was written)
        """
        row = reading.model_dump()
        row["indoorTd"] = compute_indoor_td(reading.temp, reading.rH)

        with self._connect() as conn:
            try:
                with conn.begin():
                    result = conn.execute(insert(iaq_table).values(**row))
            except SQLAlchemyError as e:
                raise StorageWriteError("Failed to store sensor reading") from e

        new_id = result.inserted_primary_key[0]
        logger.info(f"[{reading.location}] Stored reading id={new_id}")
        return new_id

    def fetch_readings(
        self,
        limit: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> list[dict]:
        """
        Get readings, newest first.

        Args:
            limit: Maximum number of rows
            start: Only rows with recTime >= start
            end: Only rows with recTime <= end

        Returns:
            One dict per row, keyed by column name
        """
        query = select(iaq_table)
        if start is not None:
            query = query.where(iaq_table.c.recTime >= start)
        if end is not None:
            query = query.where(iaq_table.c.recTime <= end)
        query = query.order_by(iaq_table.c.recTime.desc(), iaq_table.c.id.desc()).limit(limit)

        with self._connect() as conn:
            try:
                rows = conn.execute(query).mappings().all()
            except SQLAlchemyError as e:
                raise StorageReadError("Failed to fetch sensor data") from e

        return [dict(row) for row in rows]

    def count_readings(self) -> int:
        """How many rows are in the table."""
        with self._connect() as conn:
            try:
                return conn.execute(select(func.count()).select_from(iaq_table)).scalar_one()
            except SQLAlchemyError as e:
                raise StorageReadError("Failed to count sensor data") from e

    def ping(self) -> bool:
        """Check the database answers. Used by /health."""
        try:
            with self._connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except (StorageError, SQLAlchemyError):
            return False

    def dispose(self):
        """Close every pooled connection. Called on shutdown."""
        self.engine.dispose()
