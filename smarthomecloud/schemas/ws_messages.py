from __future__ import annotations
from typing import Any
from pydantic import BaseModel


class WSMessage(BaseModel):
    event: str  # alert_created | alert_updated
    house_id: str = ""
    data: dict[str, Any] = {}
