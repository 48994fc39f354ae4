# catalog_api/routes/verification.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from catalog_api.core.database import get_db
from catalog_api.core.validation import is_email, is_uuid4, normalize_email
from catalog_api.dependencies.auth import get_verification_manager
from catalog_api.schemas.common import MessageOut, VerifyOut
from catalog_api.services.email_verification import VerificationOutcome, VerificationTokenManager
from catalog_api.services.users import get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/user", tags=["verification"])

EXPIRED_MESSAGE = "Verification link has expired. Please request a new verification email."


@router.get("/verify", response_model=None)
def verify_email(
    email: str | None = Query(None),
    token: str | None = Query(None),
    db: Session = Depends(get_db),
    manager: VerificationTokenManager = Depends(get_verification_manager),
):
    """
    Confirm an email address with the token from the verification message.

    Parameter format is checked before any lookup so garbage never reaches
    the database.
    """
    email = (email or "").strip()
    token = (token or "").strip()

    if not email or not token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required parameters: email and token are required",
        )
    if not is_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")
    if not is_uuid4(token):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid verification token format")

    user = get_user_by_email(db, normalize_email(email))
    if user is None:
        logger.warning("Email verification failed - user not found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user_id = user.id
    outcome = manager.check(db, user, token)

    if outcome is VerificationOutcome.ALREADY_VERIFIED:
        logger.info("Email already verified: user_id=%s", user_id)
        return MessageOut(message="Email already verified")
    if outcome is VerificationOutcome.INVALID:
        logger.warning("Email verification failed - token mismatch: user_id=%s", user_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid verification token")
    if outcome is VerificationOutcome.EXPIRED:
        logger.warning("Email verification failed - token expired: user_id=%s", user_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EXPIRED_MESSAGE)

    logger.info("Email verified successfully: user_id=%s", user_id)
    return VerifyOut(message="Email verified successfully", email_verified=True)


@router.api_route(
    "/verify",
    methods=["POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
def verify_method_not_allowed():
    # Registered explicitly so "/v1/user/{user_id}" never captures "verify".
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed. Only GET is supported.",
        headers={"Allow": "GET"},
    )
