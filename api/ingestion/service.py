"""
Ingestion "service layer".

This file contains logic that is independent of FastAPI's routing layer:
- Structural check of a batch payload (non-empty list of objects)
- Atomic insert through the repository
- Converting storage faults into `InsertFailed`

Field-level validation is intentionally absent. A record is forwarded with
whatever values the client sent and PostgreSQL is the one that rejects a
bad type, which aborts the whole batch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import asyncpg

from core import errors

from . import repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    inserted_count: int


def validate_batch(records: Any) -> list[Mapping[str, Any]]:
    """
    Return the records if they form a non-empty list of objects.
    """
    if not isinstance(records, list) or not records:
        raise errors.EmptyBatch()

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise errors.MalformedBatch(f"detections[{index}] must be an object")

    return records


async def ingest_batch(pool: asyncpg.Pool, *, owner_id: str, records: Any) -> IngestResult:
    batch = validate_batch(records)

    try:
        inserted = await repository.insert_detections(pool, owner_id=owner_id, records=batch)
    except errors.InsertFailed as exc:
        logger.exception(
            "detections_batch_insert_failed owner_id=%s size=%s index=%s",
            owner_id,
            len(batch),
            exc.index,
        )
        raise
    except Exception as exc:
        logger.exception(
            "detections_batch_insert_failed owner_id=%s size=%s index=%s",
            owner_id,
            len(batch),
            None,
        )
        raise errors.InsertFailed() from exc

    if inserted != len(batch):
        # Unreachable with a well-behaved driver; never report a partial count.
        logger.error(
            "detections_batch_count_mismatch owner_id=%s size=%s inserted=%s",
            owner_id,
            len(batch),
            inserted,
        )
        raise errors.InsertFailed()

    logger.info("detections_batch_inserted owner_id=%s inserted=%s", owner_id, inserted)
    return IngestResult(inserted_count=inserted)
