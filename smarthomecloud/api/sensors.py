"""Device telemetry ingest."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.config import Settings
from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import get_settings_dep, require_staff
from smarthomecloud.schemas import SensorReadingCreate, SensorReadingRead
from smarthomecloud.services.alerts import raise_alert
from smarthomecloud.services.auth import AuthContext

router = APIRouter(prefix="/api/sensors", tags=["sensors"])


@router.post("/readings", response_model=SensorReadingRead, status_code=201)
async def record_reading(
    body: SensorReadingCreate,
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    device = await crud.get_device(db, body.device_id)
    if not device:
        raise HTTPException(404, "Device not found")

    reading = await crud.create_sensor_reading(
        db, device.id, body.data_type, value=body.value, metadata=body.metadata,
    )

    heartbeat = {"status": "online", "last_seen": datetime.now(timezone.utc)}
    if body.battery_level is not None:
        heartbeat["battery_level"] = body.battery_level
    await crud.update_device(db, device, **heartbeat)

    monitor = settings.device_monitor
    if body.data_type == "temperature" and body.value is not None and not (
        monitor.temperature_min <= body.value <= monitor.temperature_max
    ):
        direction = "above" if body.value > monitor.temperature_max else "below"
        await raise_alert(
            db,
            house_id=device.house_id,
            device_id=device.id,
            type="temperature_anomaly",
            severity="medium",
            title=f"Temperature anomaly: {device.name}",
            description=(
                f"{device.name} in {device.room} reported {body.value:.1f}°F, {direction} the "
                f"expected range of {monitor.temperature_min:.0f}-{monitor.temperature_max:.0f}°F."
            ),
            location=device.room,
        )
    return reading
