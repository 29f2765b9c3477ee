"""Dashboard summary counts, scoped to what the caller can see."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.config import Settings
from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import get_settings_dep, require_auth
from smarthomecloud.models import Alert, Device, House
from smarthomecloud.services.access import scope_house_ids
from smarthomecloud.services.alerts import OPEN_STATUSES
from smarthomecloud.services.auth import AuthContext

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
async def dashboard_stats(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    house_ids = await scope_house_ids(auth, db)

    house_filter = [] if house_ids is None else [House.id.in_(house_ids)]
    device_filter = [] if house_ids is None else [Device.house_id.in_(house_ids)]
    alert_filter = [] if house_ids is None else [Alert.house_id.in_(house_ids)]

    devices_by_status = await crud.count_grouped(db, Device.status, *device_filter)
    alerts_by_status = await crud.count_grouped(db, Alert.status, *alert_filter)
    open_by_severity = await crud.count_grouped(
        db, Alert.severity, Alert.status.in_(OPEN_STATUSES), *alert_filter,
    )
    low_battery = await crud.count_rows(
        db, Device,
        Device.battery_level.is_not(None),
        Device.battery_level < settings.device_monitor.low_battery_threshold,
        *device_filter,
    )

    return {
        "houses": await crud.count_rows(db, House, *house_filter),
        "devices": {
            "total": sum(devices_by_status.values()),
            "by_status": {s: devices_by_status.get(s, 0) for s in ("online", "offline", "warning")},
            "low_battery": low_battery,
        },
        "alerts": {
            "total": sum(alerts_by_status.values()),
            "by_status": {
                s: alerts_by_status.get(s, 0)
                for s in ("new", "acknowledged", "resolved", "dismissed")
            },
            "open_by_severity": {
                s: open_by_severity.get(s, 0) for s in ("low", "medium", "high", "critical")
            },
        },
    }
