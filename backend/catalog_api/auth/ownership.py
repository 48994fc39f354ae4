# catalog_api/auth/ownership.py
"""
Owner-only authorization for mutating operations.

Ownership is the only rule: a resource may be updated or deleted by the user
whose id is stored in its ``owner_user_id``. Callers must load the resource
first and answer 404 for a missing one; this module only ever decides
between allowed and forbidden.
"""
from __future__ import annotations

import enum
import logging
from typing import Protocol

from fastapi import HTTPException, status

from catalog_api.auth.identity import Identity

logger = logging.getLogger(__name__)


class OwnedResource(Protocol):
    @property
    def owner_user_id(self) -> str: ...


class OwnershipDecision(str, enum.Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"


def authorize_mutation(identity: Identity, resource: OwnedResource) -> OwnershipDecision:
    if resource.owner_user_id is not None and str(resource.owner_user_id) == identity.id:
        return OwnershipDecision.ALLOWED
    return OwnershipDecision.FORBIDDEN


def require_owner(identity: Identity, resource: OwnedResource, message: str) -> None:
    if authorize_mutation(identity, resource) is OwnershipDecision.FORBIDDEN:
        logger.warning(
            "Ownership check failed: user_id=%s resource=%s",
            identity.id,
            type(resource).__name__,
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
