# catalog_api/services/users.py
"""
User account helpers (the credential store).

Responsibilities:
- Lookups by email (login principal) and by id
- Account creation with a pending email verification
- Explicit password / profile updates (no ORM lifecycle hooks)
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_api.core.security import PasswordHasher
from catalog_api.core.validation import normalize_email
from catalog_api.models.user import User
from catalog_api.services.email_verification import VerificationTokenManager
from catalog_api.services.notifications import NotificationError, publish_user_verification

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by email address."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_or_404(db: Session, user_id: str) -> User:
    user = get_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    hasher: PasswordHasher,
    verification: VerificationTokenManager,
) -> User:
    """
    Create an unverified account, issue its verification token and publish
    the verification notification. Nothing is committed unless publishing
    succeeds.
    """
    email = normalize_email(email)
    if get_user_by_email(db, email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")

    user = User(email=email, first_name=first_name, last_name=last_name)
    user.set_password(password, hasher)
    token = verification.issue(user)
    db.add(user)

    try:
        db.flush()
        publish_user_verification(user, token)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email.
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")
    except NotificationError as e:
        db.rollback()
        logger.error("User creation rolled back, verification notification failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to send verification email. Please try again later.",
        )
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("User created: user_id=%s", user.id)
    return user


def update_user(
    db: Session,
    user: User,
    *,
    hasher: PasswordHasher,
    password: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    if password is not None:
        user.set_password(password, hasher)
    if first_name is not None:
        user.first_name = first_name
    if last_name is not None:
        user.last_name = last_name
    user.touch_updated_at()

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User updated: user_id=%s password_changed=%s", user.id, password is not None)
    return user
