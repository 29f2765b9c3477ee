from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from smarthomecloud.schemas.common import MaintenanceStatus, MaintenanceCategory, Severity, not_null

_DATE = r"^\d{4}-\d{2}-\d{2}$"
_TIME = r"^\d{2}:\d{2}$"


class MaintenanceCreate(BaseModel):
    task: str = Field(min_length=1)
    scheduled_date: str = Field(pattern=_DATE)
    scheduled_time: str = Field(default="08:00", pattern=_TIME)
    status: MaintenanceStatus = "scheduled"
    category: MaintenanceCategory = "other"
    priority: Severity = "medium"
    description: str | None = None
    assigned_to: str | None = None


class MaintenanceUpdate(BaseModel):
    task: str | None = Field(default=None, min_length=1)
    scheduled_date: str | None = Field(default=None, pattern=_DATE)
    scheduled_time: str | None = Field(default=None, pattern=_TIME)
    status: MaintenanceStatus | None = None
    category: MaintenanceCategory | None = None
    priority: Severity | None = None
    description: str | None = None
    assigned_to: str | None = None

    @field_validator("task", "scheduled_date", "scheduled_time", "status", "category", "priority")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class MaintenanceRead(BaseModel):
    id: str
    task: str
    scheduled_date: str
    scheduled_time: str
    status: str
    category: str
    priority: str
    description: str | None = None
    assigned_to: str | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
