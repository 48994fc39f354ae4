# catalog_api/core/config.py
import os
from dataclasses import dataclass
from urllib.parse import quote_plus

from dotenv import load_dotenv


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def merge_unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in items:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


@dataclass(frozen=True)
class PasswordHashConfig:
    """Work factor for the argon2 password hasher."""

    rounds: int = 2
    memory_cost: int = 19456  # KiB
    parallelism: int = 1


@dataclass(frozen=True)
class VerificationConfig:
    """Lifetime of a pending email verification token."""

    expiry_seconds: int = 60


class Settings:
    def __init__(self) -> None:
        # Only load .env for local/dev. In deployed environments env vars come from the host.
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | test | prod
        if self.ENV != "prod":
            load_dotenv()

        # ----------------------------
        # Database
        # ----------------------------
        # Full URL override (local sqlite, tests). Takes precedence over the DB_* parts.
        self.DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
        self.DB_HOST = os.getenv("DB_HOST", "")
        self.DB_PORT = os.getenv("DB_PORT", "5432")
        self.DB_NAME = os.getenv("DB_NAME", "")
        self.DB_APP_USER = os.getenv("DB_APP_USER", "")
        self.DB_APP_PASSWORD = os.getenv("DB_APP_PASSWORD", "")
        self.DB_MIGRATOR_USER = os.getenv("DB_MIGRATOR_USER", "")
        self.DB_MIGRATOR_PASSWORD = os.getenv("DB_MIGRATOR_PASSWORD", "")
        self.DB_SSLMODE = os.getenv("DB_SSLMODE", "require").strip().lower()

        # ----------------------------
        # Passwords
        # ----------------------------
        self.PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", "6"))
        self.PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "2"))
        self.PASSWORD_HASH_MEMORY_KIB = int(os.getenv("PASSWORD_HASH_MEMORY_KIB", "19456"))
        self.PASSWORD_HASH_PARALLELISM = int(os.getenv("PASSWORD_HASH_PARALLELISM", "1"))

        # ----------------------------
        # Email verification
        # ----------------------------
        self.EMAIL_VERIFY_TOKEN_EXPIRE_SECONDS = int(os.getenv("EMAIL_VERIFY_TOKEN_EXPIRE_SECONDS", "60"))

        # ----------------------------
        # CORS
        # ----------------------------
        dev_defaults = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]

        cors_from_env = parse_csv(os.getenv("CORS_ORIGINS"))
        if self.ENV == "prod":
            self.CORS_ORIGINS = merge_unique(cors_from_env)
        else:
            self.CORS_ORIGINS = merge_unique(cors_from_env + dev_defaults)

        # ----------------------------
        # AWS: S3 images / SNS verification topic
        # ----------------------------
        self.AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
        self.S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME", "")
        self.S3_PREFIX = os.getenv("S3_PREFIX", "").strip().strip("/")
        self.MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
        self.SNS_TOPIC_ARN = os.getenv("SNS_TOPIC_ARN", "").strip()

        # ----------------------------
        # Logging
        # ----------------------------
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        self.LOG_FILE = os.getenv("LOG_FILE", "").strip()

        # Final: fail fast in prod
        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        missing: list[str] = []

        if not self.DATABASE_URL:
            if not self.DB_HOST:
                missing.append("DB_HOST")
            if not self.DB_NAME:
                missing.append("DB_NAME")
            if not self.DB_APP_USER:
                missing.append("DB_APP_USER")
            if not self.DB_APP_PASSWORD:
                missing.append("DB_APP_PASSWORD")
            if self.DB_SSLMODE != "require":
                raise RuntimeError("DB_SSLMODE must be 'require' in prod")

        if not self.S3_BUCKET_NAME:
            missing.append("S3_BUCKET_NAME")
        if not self.SNS_TOPIC_ARN:
            missing.append("SNS_TOPIC_ARN")

        cors_joined = ",".join(self.CORS_ORIGINS)
        if "localhost" in cors_joined or "127.0.0.1" in cors_joined:
            raise RuntimeError("CORS_ORIGINS contains localhost/dev origins in prod")

        if self.EMAIL_VERIFY_TOKEN_EXPIRE_SECONDS <= 0:
            raise RuntimeError("EMAIL_VERIFY_TOKEN_EXPIRE_SECONDS must be positive")

        if missing:
            raise RuntimeError(f"Missing required prod env vars: {', '.join(missing)}")

    @property
    def is_prod(self) -> bool:
        return self.ENV == "prod"

    @property
    def password_hashing(self) -> PasswordHashConfig:
        return PasswordHashConfig(
            rounds=self.PASSWORD_HASH_ROUNDS,
            memory_cost=self.PASSWORD_HASH_MEMORY_KIB,
            parallelism=self.PASSWORD_HASH_PARALLELISM,
        )

    @property
    def verification(self) -> VerificationConfig:
        return VerificationConfig(expiry_seconds=self.EMAIL_VERIFY_TOKEN_EXPIRE_SECONDS)

    def _build_database_url(self, user: str, password: str) -> str:
        encoded_password = quote_plus(password)
        return (
            f"postgresql+psycopg2://{user}:{encoded_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSLMODE}"
        )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return self._build_database_url(self.DB_APP_USER, self.DB_APP_PASSWORD)

    @property
    def migrations_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return self._build_database_url(self.DB_MIGRATOR_USER, self.DB_MIGRATOR_PASSWORD)


settings = Settings()
