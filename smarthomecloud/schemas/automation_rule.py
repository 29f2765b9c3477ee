from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field

from smarthomecloud.schemas.common import RuleStatus


class AutomationRuleCreate(BaseModel):
    name: str = Field(min_length=1)
    trigger: str = Field(min_length=1)
    action: str = Field(min_length=1)
    status: RuleStatus = "active"


class AutomationRuleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    trigger: str | None = Field(default=None, min_length=1)
    action: str | None = Field(default=None, min_length=1)
    status: RuleStatus | None = None


class AutomationRuleRead(BaseModel):
    id: str
    house_id: str
    name: str
    trigger: str
    action: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
