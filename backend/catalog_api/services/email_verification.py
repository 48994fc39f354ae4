from __future__ import annotations

import enum
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session

from catalog_api.core.config import VerificationConfig
from catalog_api.models.user import User

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _tokens_match(stored: str, submitted: str) -> bool:
    return secrets.compare_digest(stored.encode("utf-8"), submitted.encode("utf-8"))


class VerificationOutcome(str, enum.Enum):
    ALREADY_VERIFIED = "already_verified"
    INVALID = "invalid"
    EXPIRED = "expired"
    OK = "ok"


class VerificationTokenManager:
    """
    Issues and consumes single-use email verification tokens.

    A token lives on the user row (``verification_token`` + ``token_created_at``)
    until it is consumed. Consumption is a conditional UPDATE keyed on the token
    still being present, so two concurrent confirmations cannot both succeed.
    """

    def __init__(self, config: VerificationConfig, clock: Callable[[], datetime] = _now_utc) -> None:
        self.config = config
        self._clock = clock

    @property
    def expiry(self) -> timedelta:
        return timedelta(seconds=self.config.expiry_seconds)

    def issue(self, user: User) -> str:
        """
        Put the user in the pending state with a fresh random token and
        return the raw token. The caller persists the user.
        """
        token = str(uuid.uuid4())
        user.verification_token = token
        user.token_created_at = self._clock()
        user.email_verified = False
        return token

    def is_expired(self, user: User) -> bool:
        if user.token_created_at is None:
            return True
        return self._clock() - _as_utc(user.token_created_at) > self.expiry

    def check(self, db: Session, user: User, submitted_token: str) -> VerificationOutcome:
        if user.email_verified:
            return VerificationOutcome.ALREADY_VERIFIED

        stored = user.verification_token
        if not stored or not submitted_token or not _tokens_match(stored, submitted_token):
            return VerificationOutcome.INVALID

        if self.is_expired(user):
            return VerificationOutcome.EXPIRED

        updated = (
            db.query(User)
            .filter(
                User.id == user.id,
                User.email_verified.is_(False),
                User.verification_token == submitted_token,
            )
            .update(
                {
                    User.email_verified: True,
                    User.verification_token: None,
                    User.token_created_at: None,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        # Reload so the caller's instance reflects the row, whichever request won.
        db.expire(user)

        if updated != 1:
            logger.info("Verification token already consumed concurrently: user_id=%s", user.id)
            return VerificationOutcome.ALREADY_VERIFIED
        return VerificationOutcome.OK
