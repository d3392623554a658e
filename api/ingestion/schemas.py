"""
Ingestion API schemas (request/response models).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class BatchRequest(BaseModel):
    # Deliberately loose: the structural check lives in `service.ingest_batch`
    # and field types are enforced by the database.
    detections: Any = None


class BatchResponse(BaseModel):
    inserted: int
