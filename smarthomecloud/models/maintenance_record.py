from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from smarthomecloud.models.base import Base, ULIDMixin, UpdatedAtMixin


class MaintenanceRecord(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "maintenance_records"

    task: Mapped[str] = mapped_column(Text)
    scheduled_date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    scheduled_time: Mapped[str] = mapped_column(String(5), default="08:00")  # HH:MM
    status: Mapped[str] = mapped_column(String(20), default="scheduled")  # scheduled | in_progress | completed | cancelled
    category: Mapped[str] = mapped_column(String(20), default="other")
    priority: Mapped[str] = mapped_column(String(10), default="medium")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
