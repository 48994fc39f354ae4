from __future__ import annotations

from typing import List

from fastapi import HTTPException, status

from catalog_api.core.config import settings

PASSWORD_MAX_LENGTH = 255


def evaluate_password(password: str | None) -> List[str]:
    """
    Returns a list of violation codes if the password cannot be accepted.

    Runs before any hashing so the hasher never sees an empty plaintext.
    """
    pw = password or ""
    violations: list[str] = []
    min_length = max(int(getattr(settings, "PASSWORD_MIN_LENGTH", 6) or 0), 1)

    if not pw.strip():
        violations.append("required")
    if len(pw) < min_length:
        violations.append("min_length")
    if len(pw) > PASSWORD_MAX_LENGTH:
        violations.append("max_length")
    return violations


def ensure_valid_password(password: str | None) -> None:
    violations = evaluate_password(password)
    if violations:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Password does not meet requirements.",
                "details": {"code": "WEAK_PASSWORD", "violations": violations},
            },
        )
