import base64
import os
from datetime import datetime, timezone

# Settings are read at import time; pin the test environment before importing catalog_api.
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SNS_TOPIC_ARN"] = ""
# Cheapest argon2 parameters; hashing cost is not under test here.
os.environ["PASSWORD_HASH_ROUNDS"] = "1"
os.environ["PASSWORD_HASH_MEMORY_KIB"] = "1024"
os.environ["PASSWORD_HASH_PARALLELISM"] = "1"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_api.core import config as app_config
from catalog_api.core.base import Base
from catalog_api.core.database import get_db
from catalog_api.core.security import get_password_hasher

# Import models so they register with SQLAlchemy metadata.
import catalog_api.models  # noqa: F401
from catalog_api.models.product import Product
from catalog_api.models.user import User

TEST_PASSWORD = "test_password_123"


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # The in-memory DB persists across tests with StaticPool; reset schema per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeS3Client:
    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_put = False
        self.fail_delete = False

    def put_object(self, Bucket, Key, Body, ContentType, ServerSideEncryption, Metadata):  # noqa: N803
        from botocore.exceptions import ClientError

        if self.fail_put:
            raise ClientError({"Error": {"Code": "InternalError", "Message": "boom"}}, "PutObject")
        self.objects[Key] = Body
        return {"ETag": '"abc123"', "ServerSideEncryption": ServerSideEncryption}

    def delete_object(self, Bucket, Key):  # noqa: N803
        from botocore.exceptions import ClientError

        if self.fail_delete:
            raise ClientError({"Error": {"Code": "InternalError", "Message": "boom"}}, "DeleteObject")
        self.deleted.append(Key)
        self.objects.pop(Key, None)
        return {}


class FakeSNSClient:
    def __init__(self):
        self.published: list[dict] = []
        self.fail = False

    def publish(self, **kwargs):
        from botocore.exceptions import ClientError

        if self.fail:
            raise ClientError({"Error": {"Code": "AuthorizationError", "Message": "denied"}}, "Publish")
        self.published.append(kwargs)
        return {"MessageId": f"msg-{len(self.published)}"}


@pytest.fixture(autouse=True)
def fake_s3(monkeypatch):
    """Stub the S3 client so tests never require AWS creds/network."""
    from catalog_api.services import s3 as s3_service

    client = FakeS3Client()
    monkeypatch.setattr(s3_service, "_client", lambda: client)
    app_config.settings.S3_BUCKET_NAME = app_config.settings.S3_BUCKET_NAME or "test-bucket"
    return client


@pytest.fixture(autouse=True)
def fake_sns(monkeypatch):
    from catalog_api.services import notifications

    client = FakeSNSClient()
    monkeypatch.setattr(notifications, "_client", lambda: client)
    return client


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). That object is
    process-global, so restore values after each test.
    """
    keys = [
        "MAX_UPLOAD_BYTES",
        "PASSWORD_MIN_LENGTH",
        "SNS_TOPIC_ARN",
        "S3_PREFIX",
        "EMAIL_VERIFY_TOKEN_EXPIRE_SECONDS",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture()
def hasher():
    return get_password_hasher()


@pytest.fixture()
def app(db_session):
    from catalog_api.main import app as fastapi_app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def basic_auth(email: str, password: str = TEST_PASSWORD) -> dict[str, str]:
    raw = f"{email}:{password}".encode("utf-8")
    return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}


@pytest.fixture()
def auth_headers():
    """Build a Basic Authorization header: ``auth_headers(email, password)``."""
    return basic_auth


def _make_user(db, hasher, email: str, *, verified: bool, token: str | None = None) -> User:
    user = User(
        email=email,
        first_name="Test",
        last_name="User",
        password_hash=hasher.hash(TEST_PASSWORD),
        email_verified=verified,
        verification_token=token,
        token_created_at=datetime.now(timezone.utc) if token else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def users(db_session, hasher):
    """
    Two distinct verified users for ownership / isolation tests.
    """
    user_a = _make_user(db_session, hasher, "test@example.com", verified=True)
    user_b = _make_user(db_session, hasher, "other@example.com", verified=True)
    return user_a, user_b


@pytest.fixture()
def pending_user(db_session, hasher):
    """A user who signed up but has not clicked the verification link yet."""
    return _make_user(
        db_session,
        hasher,
        "pending@example.com",
        verified=False,
        token="0b0f3f9e-6a8e-4c1e-9a43-3f4f1bde2b7a",
    )


@pytest.fixture()
def product(db_session, users):
    user_a, _ = users
    p = Product(
        name="Widget",
        description="A very useful widget",
        sku="WID-001",
        manufacturer="Acme",
        quantity=10,
        owner_user_id=user_a.id,
    )
    db_session.add(p)
    db_session.commit()
    db_session.refresh(p)
    return p
