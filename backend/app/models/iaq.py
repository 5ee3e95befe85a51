"""
IAQ Table
=========
SQLAlchemy Core definition of the table readings are stored in.

One row per reading. Rows are only ever inserted - never updated or deleted.

    id        - auto-increment primary key (insertion order)
    recTime   - when the row was written, set by the database itself
    location  - which sensor unit sent the reading
    ...       - the raw measurements, exactly as validated
    indoorTd  - derived on the server: temp - ((100 - rH) / 5)
"""

from sqlalchemy import Column, DateTime, Float, Integer, MetaData, String, Table, func

metadata = MetaData()

# Measurement columns posted by the device, in wire order
READING_COLUMNS = (
    "temp",
    "rH",
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
)

iaq_table = Table(
    "IAQ",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("location", String(64), nullable=False, index=True),
    Column("recTime", DateTime, nullable=False, server_default=func.now(), index=True),
    *(Column(name, Float, nullable=False) for name in READING_COLUMNS),
    Column("indoorTd", Float, nullable=False),
)
