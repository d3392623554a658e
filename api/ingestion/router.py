"""
FastAPI router for ingestion endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth.schemas import IdentityClaim
from core import db

from . import schemas, service

router = APIRouter()


@router.post("/detections/batch", response_model=schemas.BatchResponse)
async def ingest_detections_batch(
    request: schemas.BatchRequest,
    current_user: IdentityClaim = Depends(auth_dependencies.get_current_user),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> schemas.BatchResponse:
    """
    Insert a batch of detections for the current user, all or nothing.
    """
    result = await service.ingest_batch(pool, owner_id=current_user.id, records=request.detections)
    return schemas.BatchResponse(inserted=result.inserted_count)
