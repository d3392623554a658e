"""
Aggregation service.

Thin wrappers over the read queries that turn any storage fault into
`QueryFailed`. Nothing is returned unless the whole query succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any

import asyncpg

from core import errors

from . import repository

logger = logging.getLogger(__name__)

GENERIC_QUERY_ERROR = "Internal server error"


async def _run_query(
    operation: str,
    query: Awaitable[list[dict[str, Any]]],
    *,
    message: str = GENERIC_QUERY_ERROR,
    **context: Any,
) -> list[dict[str, Any]]:
    try:
        return await query
    except Exception as exc:
        details = " ".join(f"{key}={value}" for key, value in context.items())
        logger.exception("%s_failed %s", operation, details)
        raise errors.QueryFailed(message) from exc


async def summarize_devices_for_event(pool: asyncpg.Pool, event_id: str) -> list[dict[str, Any]]:
    """
    One row per MAC seen in the event, busiest first.
    """
    return await _run_query(
        "summarize_devices_for_event",
        repository.summarize_devices_for_event(pool, event_id),
        event_id=event_id,
    )


async def list_detections(pool: asyncpg.Pool, event_id: str, mac_address: str) -> list[dict[str, Any]]:
    """
    Most recent detections of one MAC within one event (hard cap, not a page).
    """
    return await _run_query(
        "list_detections",
        repository.list_detections(pool, event_id, mac_address),
        event_id=event_id,
        mac_address=mac_address,
    )


async def summarize_all_devices(pool: asyncpg.Pool) -> list[dict[str, Any]]:
    return await _run_query(
        "summarize_all_devices",
        repository.summarize_all_devices(pool),
        message="Failed to load device MAC summaries",
    )


async def list_detections_for_mac(pool: asyncpg.Pool, mac_address: str) -> list[dict[str, Any]]:
    return await _run_query(
        "list_detections_for_mac",
        repository.list_detections_for_mac(pool, mac_address),
        message="Failed to load detections for MAC",
        mac_address=mac_address,
    )
