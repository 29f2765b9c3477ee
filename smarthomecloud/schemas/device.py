from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field, field_validator

from smarthomecloud.schemas.common import DeviceType, DeviceStatus, not_null


class DeviceCreate(BaseModel):
    house_id: str
    name: str = Field(min_length=1)
    type: DeviceType
    room: str = Field(min_length=1)
    serial_number: str | None = None
    status: DeviceStatus = "offline"
    firmware_version: str | None = None
    battery_level: int | None = Field(default=None, ge=0, le=100)
    config: dict[str, Any] | None = None


class DeviceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    room: str | None = Field(default=None, min_length=1)
    status: DeviceStatus | None = None
    firmware_version: str | None = None
    battery_level: int | None = Field(default=None, ge=0, le=100)
    config: dict[str, Any] | None = None

    @field_validator("name", "room", "status")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class DeviceRead(BaseModel):
    id: str
    house_id: str
    serial_number: str | None = None
    name: str
    type: str
    room: str
    status: str
    firmware_version: str | None = None
    battery_level: int | None = None
    last_seen: datetime | None = None
    config: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
