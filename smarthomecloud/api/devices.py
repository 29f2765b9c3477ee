from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.api.houses import get_accessible_house
from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_auth, require_staff
from smarthomecloud.models import Device
from smarthomecloud.schemas import (
    DeviceCreate, DeviceUpdate, DeviceRead,
    SensorReadingRead, SurveillanceFeedCreate, SurveillanceFeedRead,
)
from smarthomecloud.services.access import scope_house_ids
from smarthomecloud.services.auth import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/devices", tags=["devices"])

# Device fields whose changes are written to config_change_logs
AUDITED_FIELDS = ("status", "firmware_version", "config")


def _log_value(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


async def get_accessible_device(db: AsyncSession, auth: AuthContext, device_id: str) -> Device:
    device = await crud.get_device(db, device_id)
    if not device:
        raise HTTPException(404, "Device not found")
    await get_accessible_house(db, auth, device.house_id)
    return device


@router.post("", response_model=DeviceRead, status_code=201)
async def create_device(
    body: DeviceCreate,
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    if not await crud.get_house(db, body.house_id):
        raise HTTPException(404, "House not found")
    if body.serial_number and await crud.get_device_by_serial(db, body.serial_number):
        raise HTTPException(409, "A device with this serial number already exists")
    device = await crud.create_device(db, **body.model_dump())
    logger.info("Device %s (%s) registered in house %s", device.id, device.type, device.house_id)
    return device


@router.get("", response_model=list[DeviceRead])
async def list_devices(
    house_id: str | None = None,
    type: str | None = None,
    status: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_devices(
        db, await scope_house_ids(auth, db),
        house_id=house_id, device_type=type, status=status,
    )


@router.get("/cameras", response_model=list[DeviceRead])
async def list_cameras(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_devices(db, await scope_house_ids(auth, db), device_type="camera")


@router.get("/{device_id}", response_model=DeviceRead)
async def get_device(
    device_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await get_accessible_device(db, auth, device_id)


@router.patch("/{device_id}", response_model=DeviceRead)
async def update_device(
    device_id: str,
    body: DeviceUpdate,
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    device = await crud.get_device(db, device_id)
    if not device:
        raise HTTPException(404, "Device not found")

    changes = body.model_dump(exclude_unset=True)
    for field in AUDITED_FIELDS:
        if field in changes and changes[field] != getattr(device, field):
            await crud.create_config_log(
                db, auth.user_id, f"device:{device.id}:{field}",
                _log_value(getattr(device, field)), _log_value(changes[field]),
                commit=False,
            )
    return await crud.update_device(db, device, **changes)


@router.delete("/{device_id}", status_code=204)
async def delete_device(
    device_id: str,
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    device = await crud.get_device(db, device_id)
    if not device:
        raise HTTPException(404, "Device not found")
    await crud.delete_device(db, device)
    return Response(status_code=204)


@router.get("/{device_id}/readings", response_model=list[SensorReadingRead])
async def list_device_readings(
    device_id: str,
    limit: int = Query(default=100, ge=1, le=1000),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await get_accessible_device(db, auth, device_id)
    return await crud.list_readings_for_device(db, device_id, limit=limit)


@router.post("/{device_id}/feeds", response_model=SurveillanceFeedRead, status_code=201)
async def create_feed(
    device_id: str,
    body: SurveillanceFeedCreate,
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    device = await crud.get_device(db, device_id)
    if not device:
        raise HTTPException(404, "Device not found")
    if device.type != "camera":
        raise HTTPException(400, "Surveillance feeds can only be attached to cameras")
    return await crud.create_surveillance_feed(
        db, device.id, body.feed_url, thumbnail_url=body.thumbnail_url, is_live=body.is_live,
    )
