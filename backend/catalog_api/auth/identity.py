# catalog_api/auth/identity.py
"""
Authenticated principal for a request.

Built from a ``User`` row by the authenticator. It carries only public account
fields, so the password hash and the pending verification token cannot leak
through ``request.state`` or a response model. Routes reason about "who is
calling?" through this object and load the ORM row only when they need to
write.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog_api.models.user import User


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    first_name: str
    last_name: str
    email_verified: bool
    account_created: datetime | None = None
    account_updated: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> Identity:
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            email_verified=bool(user.email_verified),
            account_created=user.account_created,
            account_updated=user.account_updated,
        )
