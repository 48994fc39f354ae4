# catalog_api/models/user.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from catalog_api.core.base import Base

if TYPE_CHECKING:
    from catalog_api.core.security import PasswordHasher


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Login principal, stored lower-cased.
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)

    account_created = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    account_updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    email_verified = Column(Boolean, nullable=False, default=False, server_default="false")
    # Both set while a verification is pending, both null otherwise.
    verification_token = Column(String(36), unique=True, nullable=True)
    token_created_at = Column(DateTime(timezone=True), nullable=True)

    products = relationship(
        "Product",
        back_populates="owner",
        cascade="all, delete-orphan",
    )

    @property
    def owner_user_id(self) -> str:
        # Accounts are owned by themselves.
        return self.id

    def set_password(self, plaintext: str, hasher: PasswordHasher) -> None:
        self.password_hash = hasher.hash(plaintext)

    def touch_updated_at(self) -> None:
        self.account_updated = _utcnow()
