# catalog_api/auth/basic.py
"""
HTTP Basic authentication against the users table.

Flow for ``Authorization: Basic base64(email:password)``:
- decode the header (scheme check, base64, first ``:`` split)
- look the email up; unknown emails still pay for a hash check
- verify the password with the configured ``PasswordHasher``
- refuse accounts whose email is not verified yet

Every failure is a typed ``AuthenticationError`` so the HTTP layer can map
it to 401/403 without string matching. Nothing here writes to the database.
"""
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from catalog_api.auth.identity import Identity
from catalog_api.core.security import PasswordHasher
from catalog_api.services.users import get_user_by_email

logger = logging.getLogger(__name__)

BASIC_SCHEME = "basic"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AuthenticationError(Exception):
    """Base exception for credential failures."""

    message = "Authentication required"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class MissingCredentialsError(AuthenticationError):
    """No Authorization header was sent."""

    message = "Authentication required"


class UnsupportedSchemeError(AuthenticationError):
    """The Authorization header uses a scheme other than Basic."""

    message = "Basic authentication required"


class MalformedCredentialsError(AuthenticationError):
    """The Basic payload could not be decoded into email and password."""

    message = "Invalid credentials format"


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password. The two cases are indistinguishable."""

    message = INVALID_CREDENTIALS_MESSAGE


class UnverifiedIdentityError(AuthenticationError):
    """Correct credentials, but the email address is not verified yet."""

    message = "Email not verified. Please verify your email before accessing this resource."

    def __init__(self, identity: Identity) -> None:
        super().__init__()
        self.identity = identity


# ---------------------------------------------------------------------------
# Header decoding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BasicCredentials:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"BasicCredentials(email={self.email!r}, password='***')"


def parse_basic_authorization(authorization: str | None) -> BasicCredentials:
    if not authorization or not authorization.strip():
        raise MissingCredentialsError()

    scheme, param = get_authorization_scheme_param(authorization.strip())
    if scheme.lower() != BASIC_SCHEME:
        raise UnsupportedSchemeError()

    try:
        decoded = base64.b64decode(param.strip(), validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        # ValueError covers UnicodeDecodeError.
        raise MalformedCredentialsError() from exc

    # Passwords may contain ":"; only the first one separates the email.
    email, sep, password = decoded.partition(":")
    if not sep or not email.strip() or not password:
        raise MalformedCredentialsError()

    return BasicCredentials(email=email.strip().lower(), password=password)


# ---------------------------------------------------------------------------
# Authenticator
# ---------------------------------------------------------------------------


class BasicAuthenticator:
    def __init__(self, hasher: PasswordHasher) -> None:
        self.hasher = hasher

    def authenticate(self, db: Session, authorization: str | None) -> Identity:
        credentials = parse_basic_authorization(authorization)

        user = get_user_by_email(db, credentials.email)
        if user is None:
            # Same hashing cost as a wrong password so response time does not reveal the email.
            self.hasher.dummy_verify()
            raise InvalidCredentialsError()

        if not self.hasher.verify(credentials.password, user.password_hash):
            raise InvalidCredentialsError()

        identity = Identity.from_user(user)
        if not user.email_verified:
            logger.warning("Access denied - email not verified: user_id=%s", user.id)
            raise UnverifiedIdentityError(identity)

        return identity
