from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, Float, Boolean, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column

from smarthomecloud.models.base import Base, ULIDMixin, utcnow


class AudioDetection(Base, ULIDMixin):
    __tablename__ = "audio_detections"

    device_id: Mapped[str] = mapped_column(String(26), ForeignKey("devices.id", ondelete="CASCADE"), index=True)
    house_id: Mapped[str] = mapped_column(String(26), ForeignKey("houses.id", ondelete="CASCADE"))
    file_name: Mapped[str] = mapped_column(Text)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)
    model_used: Mapped[str] = mapped_column(String(10), default="both")  # yamnet | hubert | both
    detected_class: Mapped[str] = mapped_column(String(100))
    confidence: Mapped[float] = mapped_column(Float)
    predictions: Mapped[list | None] = mapped_column(JSON, nullable=True)
    alert_generated: Mapped[bool] = mapped_column(Boolean, default=False)
    alert_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("alerts.id", ondelete="SET NULL"), nullable=True)
    processed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
