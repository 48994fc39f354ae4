# catalog_api/core/security.py
from __future__ import annotations

import logging
from functools import lru_cache

from passlib.context import CryptContext

from catalog_api.core.config import PasswordHashConfig, settings

logger = logging.getLogger(__name__)


# -------------------------
# Password hashing
# -------------------------
class PasswordHasher:
    """
    Salted one-way password hashing (argon2 via passlib).

    Verification is delegated to passlib, which compares digests in constant
    time. ``dummy_verify`` burns the same effort for callers that have no
    stored hash to check against.
    """

    def __init__(self, config: PasswordHashConfig | None = None) -> None:
        self.config = config or PasswordHashConfig()
        self._context = CryptContext(
            schemes=["argon2"],
            deprecated="auto",
            argon2__rounds=self.config.rounds,
            argon2__memory_cost=self.config.memory_cost,
            argon2__parallelism=self.config.parallelism,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hash_value: str | None) -> bool:
        if not hash_value:
            self._context.dummy_verify()
            return False
        try:
            return self._context.verify(plaintext, hash_value)
        except ValueError:
            # Unrecognised or corrupt stored hash.
            logger.warning("Stored password hash could not be parsed")
            return False

    def dummy_verify(self) -> None:
        self._context.dummy_verify()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(settings.password_hashing)
