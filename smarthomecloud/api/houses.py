from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_auth, require_cloud_staff
from smarthomecloud.models import House
from smarthomecloud.schemas import (
    HouseCreate, HouseUpdate, HouseRead,
    AutomationRuleCreate, AutomationRuleRead, SurveillanceFeedRead,
)
from smarthomecloud.services.access import CLOUD_STAFF, can_access_house, scope_house_ids
from smarthomecloud.services.auth import AuthContext

router = APIRouter(prefix="/api/houses", tags=["houses"])


async def get_accessible_house(db: AsyncSession, auth: AuthContext, house_id: str) -> House:
    house = await crud.get_house(db, house_id)
    if not house:
        raise HTTPException(404, "House not found")
    if not can_access_house(auth, house):
        raise HTTPException(403, "Access denied")
    return house


@router.post("", response_model=HouseRead, status_code=201)
async def create_house(
    body: HouseCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    fields = body.model_dump(exclude={"owner_id"})
    owner_id = auth.user_id
    if auth.role == CLOUD_STAFF and body.owner_id:
        if not await crud.get_user(db, body.owner_id):
            raise HTTPException(404, "Owner not found")
        owner_id = body.owner_id
    return await crud.create_house(db, owner_id, **fields)


@router.get("", response_model=list[HouseRead])
async def list_houses(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_houses(db, await scope_house_ids(auth, db))


@router.get("/{house_id}", response_model=HouseRead)
async def get_house(
    house_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await get_accessible_house(db, auth, house_id)


@router.patch("/{house_id}", response_model=HouseRead)
async def update_house(
    house_id: str,
    body: HouseUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    house = await get_accessible_house(db, auth, house_id)
    return await crud.update_house(db, house, **body.model_dump(exclude_unset=True))


@router.delete("/{house_id}", status_code=204)
async def delete_house(
    house_id: str,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    house = await crud.get_house(db, house_id)
    if not house:
        raise HTTPException(404, "House not found")
    await crud.delete_house(db, house)
    return Response(status_code=204)


# ── Per-house collections ────────────────────────────────

@router.get("/{house_id}/automation-rules", response_model=list[AutomationRuleRead])
async def list_automation_rules(
    house_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await get_accessible_house(db, auth, house_id)
    return await crud.list_automation_rules_for_house(db, house_id)


@router.post("/{house_id}/automation-rules", response_model=AutomationRuleRead, status_code=201)
async def create_automation_rule(
    house_id: str,
    body: AutomationRuleCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await get_accessible_house(db, auth, house_id)
    return await crud.create_automation_rule(db, house_id, **body.model_dump())


@router.get("/{house_id}/feeds", response_model=list[SurveillanceFeedRead])
async def list_feeds(
    house_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await get_accessible_house(db, auth, house_id)
    return await crud.list_feeds_for_house(db, house_id)
