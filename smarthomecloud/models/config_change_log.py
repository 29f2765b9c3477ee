from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from smarthomecloud.models.base import Base, ULIDMixin, utcnow


class ConfigChangeLog(Base, ULIDMixin):
    __tablename__ = "config_change_logs"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    config_key: Mapped[str] = mapped_column(String(255))  # e.g. "device:<id>:firmware_version"
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
