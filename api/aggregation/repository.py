"""
Detection read queries (raw SQL).

Every function runs exactly one statement; holding the pool (not a
connection) means a connection is borrowed only for that statement.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

# Only the per-event history is capped; the cross-event listing is not.
EVENT_DETECTION_HISTORY_LIMIT = 500

DETECTION_COLUMNS = """
    blustick_id,
    event_id,
    mac_address,
    signal_type,
    rssi,
    estimated_distance,
    latitude,
    longitude,
    detected_at
"""


async def summarize_devices_for_event(pool: asyncpg.Pool, event_id: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        pool,
        """
        SELECT
          mac_address,
          count(*)::int AS detection_count,
          min(detected_at) AS first_seen,
          max(detected_at) AS last_seen
        FROM detections
        WHERE event_id = $1
        GROUP BY mac_address
        ORDER BY detection_count DESC, last_seen DESC
        """,
        event_id,
    )


async def list_detections(
    pool: asyncpg.Pool,
    event_id: str,
    mac_address: str,
    *,
    limit: int = EVENT_DETECTION_HISTORY_LIMIT,
) -> list[dict[str, Any]]:
    return await db.fetch_all(
        pool,
        """
        SELECT *
        FROM detections
        WHERE event_id = $1
          AND mac_address = $2
        ORDER BY detected_at DESC
        LIMIT $3
        """,
        event_id,
        mac_address,
        limit,
    )


async def summarize_all_devices(pool: asyncpg.Pool) -> list[dict[str, Any]]:
    return await db.fetch_all(
        pool,
        """
        SELECT
          mac_address,
          count(*)::int AS detection_count,
          min(detected_at) AS first_seen,
          max(detected_at) AS last_seen
        FROM detections
        WHERE mac_address IS NOT NULL
        GROUP BY mac_address
        ORDER BY last_seen DESC
        """,
    )


async def list_detections_for_mac(pool: asyncpg.Pool, mac_address: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        pool,
        f"""
        SELECT {DETECTION_COLUMNS}
        FROM detections
        WHERE mac_address = $1
        ORDER BY detected_at DESC
        """,
        mac_address,
    )
