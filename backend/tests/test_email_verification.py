from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from catalog_api.core.config import VerificationConfig
from catalog_api.dependencies.auth import get_verification_manager
from catalog_api.models.user import User
from catalog_api.services.email_verification import VerificationOutcome, VerificationTokenManager

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture()
def clock():
    return FrozenClock(T0)


@pytest.fixture()
def manager(clock):
    return VerificationTokenManager(VerificationConfig(expiry_seconds=60), clock=clock)


def _pending(db: Session, hasher, manager: VerificationTokenManager, email: str = "new@example.com") -> tuple[User, str]:
    user = User(email=email, first_name="New", last_name="User")
    user.set_password("password123", hasher)
    token = manager.issue(user)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, token


def test_issue_sets_pending_state(db_session, hasher, manager):
    user, token = _pending(db_session, hasher, manager)

    assert user.email_verified is False
    assert user.verification_token == token
    assert uuid.UUID(token).version == 4
    assert user.token_created_at is not None


def test_issue_gives_every_user_a_distinct_token(db_session, hasher, manager):
    _, t1 = _pending(db_session, hasher, manager, "a@example.com")
    _, t2 = _pending(db_session, hasher, manager, "b@example.com")
    assert t1 != t2


def test_verification_within_window_succeeds_once(db_session, hasher, manager, clock):
    user, token = _pending(db_session, hasher, manager)
    clock.advance(30)

    assert manager.check(db_session, user, token) is VerificationOutcome.OK
    db_session.refresh(user)
    assert user.email_verified is True
    assert user.verification_token is None
    assert user.token_created_at is None

    # Re-clicking the same link is harmless.
    assert manager.check(db_session, user, token) is VerificationOutcome.ALREADY_VERIFIED


def test_verification_after_expiry_is_rejected_and_state_unchanged(db_session, hasher, manager, clock):
    user, token = _pending(db_session, hasher, manager)
    clock.advance(61)

    assert manager.check(db_session, user, token) is VerificationOutcome.EXPIRED
    db_session.refresh(user)
    assert user.email_verified is False
    assert user.verification_token == token


def test_expiry_boundary_is_inclusive_of_the_last_second(db_session, hasher, manager, clock):
    user, token = _pending(db_session, hasher, manager)
    clock.advance(60)

    assert manager.check(db_session, user, token) is VerificationOutcome.OK


def test_wrong_token_is_invalid_even_when_well_formed(db_session, hasher, manager):
    user, _ = _pending(db_session, hasher, manager)

    assert manager.check(db_session, user, str(uuid.uuid4())) is VerificationOutcome.INVALID
    db_session.refresh(user)
    assert user.email_verified is False


def test_expired_token_stays_expired(db_session, hasher, manager, clock):
    user, token = _pending(db_session, hasher, manager)
    clock.advance(120)

    assert manager.check(db_session, user, token) is VerificationOutcome.EXPIRED
    assert manager.check(db_session, user, token) is VerificationOutcome.EXPIRED


def test_concurrent_loser_sees_already_verified(db_engine, db_session, hasher, manager):
    user, token = _pending(db_session, hasher, manager)

    # The losing request loaded the pending row in its own session...
    other = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        stale_user = other.get(User, user.id)
        assert stale_user.email_verified is False

        # ...then the winner consumed the token first.
        assert manager.check(db_session, user, token) is VerificationOutcome.OK

        assert manager.check(other, stale_user, token) is VerificationOutcome.ALREADY_VERIFIED
    finally:
        other.close()


# -----------------------------
# GET /v1/user/verify
# -----------------------------
@pytest.fixture()
def route_clock(app):
    clock = FrozenClock(datetime.now(timezone.utc))
    app.dependency_overrides[get_verification_manager] = lambda: VerificationTokenManager(
        VerificationConfig(expiry_seconds=60), clock=clock
    )
    return clock


def test_verify_route_success(client, pending_user, route_clock):
    res = client.get(
        "/v1/user/verify",
        params={"email": pending_user.email, "token": pending_user.verification_token},
    )
    assert res.status_code == 200
    assert res.json() == {"message": "Email verified successfully", "email_verified": True}

    again = client.get(
        "/v1/user/verify",
        params={"email": pending_user.email, "token": "0b0f3f9e-6a8e-4c1e-9a43-3f4f1bde2b7a"},
    )
    assert again.status_code == 200
    assert again.json() == {"message": "Email already verified"}


def test_verify_route_email_is_case_insensitive(client, pending_user, route_clock):
    res = client.get(
        "/v1/user/verify",
        params={"email": "PENDING@Example.com", "token": pending_user.verification_token},
    )
    assert res.status_code == 200


def test_verify_route_expired(client, pending_user, route_clock):
    route_clock.advance(3600)
    res = client.get(
        "/v1/user/verify",
        params={"email": pending_user.email, "token": pending_user.verification_token},
    )
    assert res.status_code == 400
    assert "expired" in res.json()["message"]


def test_verify_route_wrong_token(client, pending_user, route_clock):
    res = client.get("/v1/user/verify", params={"email": pending_user.email, "token": str(uuid.uuid4())})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid verification token"


@pytest.mark.parametrize(
    "params, message",
    [
        ({}, "Missing required parameters: email and token are required"),
        ({"email": "pending@example.com"}, "Missing required parameters: email and token are required"),
        ({"email": "not-an-email", "token": str(uuid.uuid4())}, "Invalid email format"),
        ({"email": "pending@example.com", "token": "abc"}, "Invalid verification token format"),
    ],
)
def test_verify_route_rejects_bad_parameters(client, pending_user, params, message):
    res = client.get("/v1/user/verify", params=params)
    assert res.status_code == 400
    assert res.json()["error"] == "VALIDATION_ERROR"
    assert res.json()["message"] == message


def test_verify_route_unknown_user(client, db_session):
    res = client.get("/v1/user/verify", params={"email": "ghost@example.com", "token": str(uuid.uuid4())})
    assert res.status_code == 404
    assert res.json()["error"] == "NOT_FOUND"


@pytest.mark.parametrize("method", ["post", "put", "patch", "delete"])
def test_verify_route_only_allows_get(client, method):
    res = client.request(method.upper(), "/v1/user/verify")
    assert res.status_code == 405
    assert res.json()["error"] == "METHOD_NOT_ALLOWED"
