from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_cloud_staff
from smarthomecloud.schemas import MaintenanceCreate, MaintenanceUpdate, MaintenanceRead
from smarthomecloud.services.auth import AuthContext

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.get("", response_model=list[MaintenanceRead])
async def list_maintenance(
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_maintenance_records(db)


@router.post("", response_model=MaintenanceRead, status_code=201)
async def create_maintenance(
    body: MaintenanceCreate,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    return await crud.create_maintenance_record(db, **body.model_dump())


@router.patch("/{record_id}", response_model=MaintenanceRead)
async def update_maintenance(
    record_id: str,
    body: MaintenanceUpdate,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    record = await crud.get_maintenance_record(db, record_id)
    if not record:
        raise HTTPException(404, "Maintenance record not found")
    return await crud.update_maintenance_record(db, record, **body.model_dump(exclude_unset=True))


@router.delete("/{record_id}", status_code=204)
async def delete_maintenance(
    record_id: str,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    record = await crud.get_maintenance_record(db, record_id)
    if not record:
        raise HTTPException(404, "Maintenance record not found")
    await crud.delete_maintenance_record(db, record)
    return Response(status_code=204)
