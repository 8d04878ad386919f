from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from core.database import ENGINE, is_transient_db_connectivity_error
from models import Base  # registers every table on the metadata


logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine | None = None) -> bool:
    """Create missing tables. Idempotent; safe across deploys.

    Returns False when the database cannot be reached so startup can continue
    with an in-memory schedule.
    """

    engine = engine or ENGINE
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except Exception as exc:
        if is_transient_db_connectivity_error(exc):
            logger.warning("Database unreachable during schema bootstrap", exc_info=exc)
            return False
        raise
    logger.info("Schema ready (%s)", ", ".join(sorted(Base.metadata.tables)))
    return True
