from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_staff
from smarthomecloud.schemas import ConfigChangeLogRead
from smarthomecloud.services.auth import AuthContext

router = APIRouter(prefix="/api/database", tags=["database"])


@router.get("/config-logs", response_model=list[ConfigChangeLogRead])
async def list_config_logs(
    limit: int = Query(default=50, ge=1, le=500),
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_config_logs(db, limit=limit)
