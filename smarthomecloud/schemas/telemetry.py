"""Sensor readings and surveillance feeds."""

from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field

from smarthomecloud.schemas.common import SensorDataType


class SensorReadingCreate(BaseModel):
    device_id: str
    data_type: SensorDataType
    value: float | None = None
    metadata: dict[str, Any] | None = None
    battery_level: int | None = Field(default=None, ge=0, le=100)


class SensorReadingRead(BaseModel):
    id: str
    device_id: str
    data_type: str
    value: float | None = None
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="metadata_json")
    recorded_at: datetime

    model_config = {"from_attributes": True}


class SurveillanceFeedCreate(BaseModel):
    feed_url: str = Field(min_length=1)
    thumbnail_url: str | None = None
    is_live: bool = True


class SurveillanceFeedRead(BaseModel):
    id: str
    device_id: str
    feed_url: str
    thumbnail_url: str | None = None
    is_live: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ConfigChangeLogRead(BaseModel):
    id: str
    user_id: str
    config_key: str
    old_value: str | None = None
    new_value: str | None = None
    recorded_at: datetime

    model_config = {"from_attributes": True}
