from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field

from smarthomecloud.schemas.common import AlertType, Severity


class AlertCreate(BaseModel):
    house_id: str
    device_id: str | None = None
    type: AlertType
    severity: Severity
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str | None = None
    ai_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    ai_details: dict[str, Any] | list[Any] | None = None


class AlertRead(BaseModel):
    id: str
    house_id: str
    device_id: str | None = None
    type: str
    severity: str
    title: str
    description: str
    location: str | None = None
    ai_confidence: float | None = None
    ai_details: dict[str, Any] | list[Any] | None = None
    status: str
    acknowledged_by: str | None = None
    acknowledged_at: datetime | None = None
    resolved_by: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
