# catalog_api/dependencies/auth.py
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from catalog_api.auth.basic import AuthenticationError, BasicAuthenticator, UnverifiedIdentityError
from catalog_api.auth.identity import Identity
from catalog_api.core.config import settings
from catalog_api.core.database import get_db
from catalog_api.core.security import PasswordHasher, get_password_hasher
from catalog_api.services.email_verification import VerificationTokenManager

BASIC_CHALLENGE = 'Basic realm="User Authentication"'


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": BASIC_CHALLENGE},
    )


@lru_cache
def get_authenticator() -> BasicAuthenticator:
    return BasicAuthenticator(get_password_hasher())


def get_hasher() -> PasswordHasher:
    return get_password_hasher()


def get_verification_manager() -> VerificationTokenManager:
    return VerificationTokenManager(settings.verification)


def get_current_user(
    request: Request,
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
    authenticator: BasicAuthenticator = Depends(get_authenticator),
) -> Identity:
    """
    Validates:
      - Authorization: Basic base64(email:password)
      - password against the stored hash
      - email verified
    Returns:
      - Identity (public projection of the user row)
    """
    try:
        identity = authenticator.authenticate(db, authorization)
    except UnverifiedIdentityError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": e.message, "code": "EMAIL_NOT_VERIFIED"},
        )
    except AuthenticationError as e:
        raise _unauthorized(e.message)

    request.state.identity = identity
    return identity
