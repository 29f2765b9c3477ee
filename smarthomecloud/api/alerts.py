from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.api.houses import get_accessible_house
from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_auth
from smarthomecloud.models import Alert
from smarthomecloud.schemas import AlertCreate, AlertRead
from smarthomecloud.services.access import scope_house_ids
from smarthomecloud.services.alerts import AlertTransitionError, raise_alert, transition_alert
from smarthomecloud.services.auth import AuthContext

router = APIRouter(prefix="/api/alerts", tags=["alerts"])


async def _get_accessible_alert(db: AsyncSession, auth: AuthContext, alert_id: str) -> Alert:
    alert = await crud.get_alert(db, alert_id)
    if not alert:
        raise HTTPException(404, "Alert not found")
    await get_accessible_house(db, auth, alert.house_id)
    return alert


@router.post("", response_model=AlertRead, status_code=201)
async def create_alert(
    body: AlertCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await get_accessible_house(db, auth, body.house_id)
    if body.device_id:
        device = await crud.get_device(db, body.device_id)
        if not device or device.house_id != body.house_id:
            raise HTTPException(400, "Device does not belong to this house")
    return await raise_alert(db, **body.model_dump())


@router.get("", response_model=list[AlertRead])
async def list_alerts(
    status: str | None = None,
    severity: str | None = None,
    house_id: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_alerts(
        db, await scope_house_ids(auth, db),
        house_id=house_id, status=status, severity=severity,
    )


@router.get("/recent", response_model=list[AlertRead])
async def list_recent_alerts(
    limit: int = Query(default=10, ge=1, le=100),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_alerts(db, await scope_house_ids(auth, db), limit=limit)


@router.get("/{alert_id}", response_model=AlertRead)
async def get_alert(
    alert_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _get_accessible_alert(db, auth, alert_id)


async def _transition(db: AsyncSession, auth: AuthContext, alert_id: str, action: str) -> Alert:
    alert = await _get_accessible_alert(db, auth, alert_id)
    try:
        return await transition_alert(db, alert, action, auth.user_id)
    except AlertTransitionError as e:
        raise HTTPException(409, str(e))


@router.post("/{alert_id}/acknowledge", response_model=AlertRead)
async def acknowledge_alert(
    alert_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _transition(db, auth, alert_id, "acknowledge")


@router.post("/{alert_id}/resolve", response_model=AlertRead)
async def resolve_alert(
    alert_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _transition(db, auth, alert_id, "resolve")


@router.post("/{alert_id}/dismiss", response_model=AlertRead)
async def dismiss_alert(
    alert_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _transition(db, auth, alert_id, "dismiss")
