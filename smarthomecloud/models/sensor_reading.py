from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column

from smarthomecloud.models.base import Base, ULIDMixin, utcnow


class SensorReading(Base, ULIDMixin):
    __tablename__ = "sensor_readings"

    device_id: Mapped[str] = mapped_column(String(26), ForeignKey("devices.id", ondelete="CASCADE"), index=True)
    data_type: Mapped[str] = mapped_column(String(30))  # temperature | motion | audio_level | video_frame | power_consumption
    value: Mapped[float | None] = mapped_column(Float, nullable=True)
    metadata_json: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
