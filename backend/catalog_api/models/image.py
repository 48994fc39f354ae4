from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from catalog_api.core.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Image(Base):
    __tablename__ = "images"

    image_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner_user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    file_name = Column(String(255), nullable=False)
    date_created = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    s3_bucket_path = Column(String(500), nullable=False)

    # Object-store response details
    file_size = Column(Integer, nullable=True)
    content_type = Column(String(100), nullable=True)
    etag = Column(String(255), nullable=True)
    version_id = Column(String(255), nullable=True)
    storage_class = Column(String(50), nullable=True, default="STANDARD")
    server_side_encryption = Column(String(50), nullable=True, default="AES256")
    # "metadata" is reserved on declarative classes.
    upload_metadata = Column("metadata", JSON, nullable=True)

    product = relationship("Product", back_populates="images")
