"""Background device-health sweep: offline detection and low-battery alerts."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from smarthomecloud.config import DeviceMonitorConfig
from smarthomecloud.db import crud
from smarthomecloud.services.alerts import raise_alert

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    marked_offline: int = 0
    low_battery_alerts: int = 0


async def sweep(db: AsyncSession, config: DeviceMonitorConfig, now: datetime | None = None) -> SweepResult:
    now = now or datetime.now(timezone.utc)
    result = SweepResult()

    cutoff = now - timedelta(minutes=config.offline_after_minutes)
    for device in await crud.list_stale_online_devices(db, cutoff):
        await crud.update_device(db, device, status="offline")
        await raise_alert(
            db,
            house_id=device.house_id,
            device_id=device.id,
            type="device_offline",
            severity="high",
            title=f"Device offline: {device.name}",
            description=(
                f"{device.name} in {device.room} has not reported for more than "
                f"{config.offline_after_minutes} minutes."
            ),
            location=device.room,
        )
        result.marked_offline += 1

    for device in await crud.list_low_battery_devices(db, config.low_battery_threshold):
        if await crud.has_open_alert(db, device.id, "low_battery"):
            continue
        await raise_alert(
            db,
            house_id=device.house_id,
            device_id=device.id,
            type="low_battery",
            severity="low",
            title=f"Low battery: {device.name}",
            description=f"{device.name} in {device.room} is at {device.battery_level}% battery.",
            location=device.room,
        )
        result.low_battery_alerts += 1

    return result


async def run_device_monitor(session_factory: async_sessionmaker, config: DeviceMonitorConfig):
    """Loop forever; cancelled from the app lifespan."""
    while True:
        try:
            async with session_factory() as db:
                result = await sweep(db, config)
            if result.marked_offline or result.low_battery_alerts:
                logger.info(
                    "Device sweep: %d marked offline, %d low-battery alerts",
                    result.marked_offline, result.low_battery_alerts,
                )
        except Exception:
            logger.exception("Device monitor sweep failed")
        await asyncio.sleep(config.interval_seconds)
