from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from catalog_api.core.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    sku = Column(String(255), unique=True, index=True, nullable=False)
    manufacturer = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=0, server_default="0")

    date_added = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    date_last_updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Fixed at creation; never part of an update payload.
    owner_user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner = relationship("User", back_populates="products")
    images = relationship(
        "Image",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="desc(Image.date_created)",
    )

    def touch_updated_at(self) -> None:
        self.date_last_updated = _utcnow()
