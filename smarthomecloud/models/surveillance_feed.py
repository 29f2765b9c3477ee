from __future__ import annotations

from sqlalchemy import String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smarthomecloud.models.base import Base, ULIDMixin
from smarthomecloud.models.encrypted_type import SealedURL


class SurveillanceFeed(Base, ULIDMixin):
    __tablename__ = "surveillance_feeds"

    device_id: Mapped[str] = mapped_column(String(26), ForeignKey("devices.id", ondelete="CASCADE"), index=True)
    # Stream URLs frequently embed camera credentials
    feed_url: Mapped[str] = mapped_column(SealedURL(1000))
    thumbnail_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_live: Mapped[bool] = mapped_column(Boolean, default=True)

    device = relationship("Device", back_populates="feeds")
