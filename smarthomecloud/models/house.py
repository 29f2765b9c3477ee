from __future__ import annotations

from sqlalchemy import String, Integer, Float, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smarthomecloud.models.base import Base, ULIDMixin, UpdatedAtMixin


class House(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "houses"

    owner_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    address: Mapped[str] = mapped_column(Text)
    square_feet: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    timezone: Mapped[str] = mapped_column(String(20), default="UTC-05:00")
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    owner = relationship("User", back_populates="houses")
    devices = relationship("Device", back_populates="house", cascade="all, delete-orphan", passive_deletes=True)
    automation_rules = relationship("AutomationRule", back_populates="house", cascade="all, delete-orphan", passive_deletes=True)
