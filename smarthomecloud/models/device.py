from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smarthomecloud.models.base import Base, ULIDMixin, UpdatedAtMixin


class Device(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "devices"

    house_id: Mapped[str] = mapped_column(String(26), ForeignKey("houses.id", ondelete="CASCADE"), index=True)
    serial_number: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(30))  # camera | microphone | motion_sensor | thermostat | lock | light | smoke_detector
    room: Mapped[str] = mapped_column(String(100))
    status: Mapped[str] = mapped_column(String(20), default="offline")  # online | offline | warning
    firmware_version: Mapped[str | None] = mapped_column(String(50), nullable=True)
    battery_level: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0-100
    last_seen: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    config: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    house = relationship("House", back_populates="devices")
    feeds = relationship("SurveillanceFeed", back_populates="device", cascade="all, delete-orphan", passive_deletes=True)
