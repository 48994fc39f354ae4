from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from catalog_api.models.health_check import HealthCheck

logger = logging.getLogger(__name__)


def record_health_check(db: Session) -> HealthCheck:
    """Insert one audit row; proves the write path, not just connectivity."""
    record = HealthCheck()
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.debug("Health check record created: check_id=%s", record.check_id)
    return record
