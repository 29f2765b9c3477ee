from __future__ import annotations

from sqlalchemy import String, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smarthomecloud.models.base import Base, ULIDMixin, UpdatedAtMixin


class AutomationRule(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "automation_rules"

    house_id: Mapped[str] = mapped_column(String(26), ForeignKey("houses.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    trigger: Mapped[str] = mapped_column(Text)  # e.g. "Motion in Yard"
    action: Mapped[str] = mapped_column(Text)  # e.g. "Turn on Light"
    status: Mapped[str] = mapped_column(String(10), default="active")  # active | inactive

    house = relationship("House", back_populates="automation_rules")
