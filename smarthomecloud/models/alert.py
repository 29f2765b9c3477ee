from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Float, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column

from smarthomecloud.models.base import Base, ULIDMixin, UpdatedAtMixin


class Alert(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "alerts"

    house_id: Mapped[str] = mapped_column(String(26), ForeignKey("houses.id", ondelete="CASCADE"), index=True)
    device_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("devices.id", ondelete="SET NULL"), nullable=True,
    )
    type: Mapped[str] = mapped_column(String(30))
    severity: Mapped[str] = mapped_column(String(10))  # low | medium | high | critical
    title: Mapped[str] = mapped_column(Text)
    description: Mapped[str] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ai_confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    ai_details: Mapped[dict | list | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="new")  # new | acknowledged | resolved | dismissed
    acknowledged_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    acknowledged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
