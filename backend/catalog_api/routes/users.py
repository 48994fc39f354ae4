# catalog_api/routes/users.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from catalog_api.auth.identity import Identity
from catalog_api.auth.ownership import require_owner
from catalog_api.core.database import get_db
from catalog_api.core.password_policy import ensure_valid_password
from catalog_api.core.security import PasswordHasher
from catalog_api.dependencies.auth import get_current_user, get_hasher, get_verification_manager
from catalog_api.dependencies.request_shape import require_no_body
from catalog_api.models.user import User
from catalog_api.schemas.user import UserCreateIn, UserOut, UserPatchIn, UserPutIn
from catalog_api.services.email_verification import VerificationTokenManager
from catalog_api.core.validation import require_uuid
from catalog_api.services.users import create_user, get_user_or_404, update_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/user", tags=["users"])


def _load_own_user(db: Session, identity: Identity, user_id: str, message: str) -> User:
    user = get_user_or_404(db, require_uuid(user_id, "user"))
    require_owner(identity, user, message)
    return user


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: UserCreateIn,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    verification: VerificationTokenManager = Depends(get_verification_manager),
) -> User:
    ensure_valid_password(payload.password)
    return create_user(
        db,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        hasher=hasher,
        verification=verification,
    )


@router.get("/{user_id}", response_model=UserOut, dependencies=[Depends(require_no_body)])
def get_account(
    user_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
) -> User:
    return _load_own_user(db, identity, user_id, "You can only access your own user information")


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_account(
    user_id: str,
    payload: UserPutIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
    hasher: PasswordHasher = Depends(get_hasher),
) -> Response:
    user = _load_own_user(db, identity, user_id, "You can only update your own user information")
    ensure_valid_password(payload.password)

    update_user(
        db,
        user,
        hasher=hasher,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def patch_account(
    user_id: str,
    payload: UserPatchIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
    hasher: PasswordHasher = Depends(get_hasher),
) -> Response:
    user = _load_own_user(db, identity, user_id, "You can only update your own user information")

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields to update")
    if "password" in changes:
        ensure_valid_password(changes["password"])

    update_user(db, user, hasher=hasher, **changes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
