"""
Device summary and detection history endpoints.
"""

from __future__ import annotations

from urllib.parse import unquote

import asyncpg
from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth.schemas import IdentityClaim
from core import db

from . import service

router = APIRouter()


@router.get("/events/{event_id}/devices")
async def list_event_devices(
    event_id: str,
    _: IdentityClaim = Depends(auth_dependencies.get_current_user),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict]:
    return await service.summarize_devices_for_event(pool, event_id)


@router.get("/events/{event_id}/devices/{mac}/detections")
async def list_event_device_detections(
    event_id: str,
    mac: str,
    _: IdentityClaim = Depends(auth_dependencies.get_current_user),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict]:
    return await service.list_detections(pool, event_id, mac)


@router.get("/devices")
async def list_devices(
    _: IdentityClaim = Depends(auth_dependencies.get_current_user),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict]:
    return await service.summarize_all_devices(pool)


@router.get("/devices/{mac}/detections")
async def list_device_detections(
    mac: str,
    _: IdentityClaim = Depends(auth_dependencies.get_current_user),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict]:
    # Clients percent-encode MACs themselves, so the routed value can still be encoded.
    return await service.list_detections_for_mac(pool, unquote(mac))
