"""
Ingestion persistence.
This module is where detection-insert SQL lives.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import asyncpg

from core import errors

# Values travel as text and PostgreSQL casts them to the column type, so a
# bad rssi/timestamp/coordinate is rejected by the store, not by Python.
# $1-$4 are left uncast: their type is inferred from the column, which must
# accept a string parameter (text, varchar or uuid; not integer).
INSERT_DETECTION_SQL = """
INSERT INTO detections (
    user_id,
    event_id,
    mac_address,
    signal_type,
    rssi,
    estimated_distance,
    latitude,
    longitude,
    detected_at
) VALUES (
    $1,
    $2,
    $3,
    $4,
    $5::text::integer,
    $6::text::double precision,
    $7::text::double precision,
    $8::text::double precision,
    $9::text::timestamptz
)
"""

INSERT_FIELDS = (
    "event_id",
    "mac_address",
    "signal_type",
    "rssi",
    "estimated_distance",
    "latitude",
    "longitude",
    "detected_at",
)


def _text_arg(value: Any) -> str | None:
    """
    Render a JSON value as the text PostgreSQL will cast.

    Non-scalar values are JSON-encoded so the cast fails loudly instead of
    asyncpg raising a Python-side encoding error.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        # -60.0 from a JSON encoder is still a valid integer rssi.
        return str(int(value))
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(value, ensure_ascii=True)


def insert_args(owner_id: str, record: Mapping[str, Any]) -> tuple[str | None, ...]:
    return (owner_id, *(_text_arg(record.get(field)) for field in INSERT_FIELDS))


async def insert_detections(
    pool: asyncpg.Pool,
    *,
    owner_id: str,
    records: Sequence[Mapping[str, Any]],
) -> int:
    """
    Insert a batch of detections in one transaction, in input order.

    Returns the number of rows inserted. The first rejected record raises
    `InsertFailed` carrying its index; leaving the transaction block by
    exception (cancellation included) rolls back every row of the batch.
    """
    inserted = 0
    async with pool.acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            for index, record in enumerate(records):
                try:
                    await conn.execute(INSERT_DETECTION_SQL, *insert_args(owner_id, record))
                except Exception as exc:
                    raise errors.InsertFailed(index=index) from exc
                inserted += 1
    return inserted
