from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Integer

from catalog_api.core.base import Base


class HealthCheck(Base):
    __tablename__ = "health_checks"

    # BIGINT on Postgres; sqlite only autoincrements INTEGER primary keys.
    check_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    check_datetime = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
