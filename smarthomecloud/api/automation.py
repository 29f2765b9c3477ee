from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.api.houses import get_accessible_house
from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_auth
from smarthomecloud.schemas import AutomationRuleUpdate, AutomationRuleRead
from smarthomecloud.services.auth import AuthContext

router = APIRouter(prefix="/api/automation-rules", tags=["automation"])


async def _get_rule(db: AsyncSession, auth: AuthContext, rule_id: str):
    rule = await crud.get_automation_rule(db, rule_id)
    if not rule:
        raise HTTPException(404, "Automation rule not found")
    await get_accessible_house(db, auth, rule.house_id)
    return rule


@router.patch("/{rule_id}", response_model=AutomationRuleRead)
async def update_automation_rule(
    rule_id: str,
    body: AutomationRuleUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    rule = await _get_rule(db, auth, rule_id)
    return await crud.update_automation_rule(db, rule, **body.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{rule_id}", status_code=204)
async def delete_automation_rule(
    rule_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    rule = await _get_rule(db, auth, rule_id)
    await crud.delete_automation_rule(db, rule)
    return Response(status_code=204)
