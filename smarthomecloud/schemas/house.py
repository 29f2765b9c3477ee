from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from smarthomecloud.schemas.common import not_null


class HouseCreate(BaseModel):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    square_feet: int | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    timezone: str = "UTC-05:00"
    latitude: float | None = None
    longitude: float | None = None
    owner_id: str | None = None  # honoured for cloud staff only


class HouseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    address: str | None = Field(default=None, min_length=1)
    square_feet: int | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    timezone: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("name", "address", "timezone")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class HouseRead(BaseModel):
    id: str
    owner_id: str | None = None
    name: str
    address: str
    square_feet: int | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    timezone: str
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
