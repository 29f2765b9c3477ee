from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel

from smarthomecloud.schemas.alert import AlertRead


class AudioDetectionRead(BaseModel):
    id: str
    device_id: str
    house_id: str
    file_name: str
    file_size: int | None = None
    duration: float | None = None
    model_used: str
    detected_class: str
    confidence: float
    predictions: list[dict[str, Any]] | None = None
    alert_generated: bool
    alert_id: str | None = None
    processed_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class AudioAnalyzeResponse(BaseModel):
    detection: AudioDetectionRead
    analysis: dict[str, Any]
    alert: AlertRead | None = None
