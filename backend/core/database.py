from __future__ import annotations

import logging
import time
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from core.config import settings


logger = logging.getLogger(__name__)


class DatabaseUnavailableError(RuntimeError):
    """The database could not be reached after retrying."""


# Pauses between connection attempts in `get_db`.
RETRY_DELAYS_SECONDS: tuple[float, ...] = (0.2, 0.5, 1.0)

_TRANSIENT_MARKERS = (
    "getaddrinfo failed",
    "could not translate host name",
    "name or service not known",
    "connection refused",
    "actively refused",
    "connection reset",
    "server closed the connection unexpectedly",
    "timeout",
    "timed out",
)

_POSTGRES_PREFIXES = ("postgresql+psycopg://", "postgresql://", "postgres://")


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        yield cur
        cur = cur.__cause__ or cur.__context__


def is_transient_db_connectivity_error(exc: BaseException) -> bool:
    """True for DNS failures, refused/reset connections and timeouts anywhere in the chain.

    SQL, constraint and schema errors are never transient.
    """

    text_ = "\n".join(str(e).lower() for e in _exception_chain(exc))
    return any(marker in text_ for marker in _TRANSIENT_MARKERS)


def normalize_database_url(url: str) -> str:
    """Point every Postgres flavour at the psycopg2 driver; other URLs pass through."""

    url = url.strip()
    for prefix in _POSTGRES_PREFIXES:
        if url.startswith(prefix):
            return "postgresql+psycopg2://" + url[len(prefix):]
    return url


def get_engine(url: str | None = None) -> Engine:
    url = normalize_database_url(url or settings.database_url)

    if url.startswith("sqlite"):
        # Saves run in FastAPI's threadpool, not the thread that opened the connection.
        return create_engine(url, connect_args={"check_same_thread": False})

    connect_args: dict[str, object] = {"connect_timeout": 3}
    try:
        parsed = make_url(url)
    except ArgumentError:
        logger.warning("Could not parse database URL; using it as given")
    else:
        # Supabase only accepts SSL connections.
        if (parsed.host or "").lower().endswith("supabase.com") and "sslmode" not in parsed.query:
            connect_args["sslmode"] = "require"

    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


ENGINE = get_engine()
SessionLocal = sessionmaker(bind=ENGINE, autoflush=False, autocommit=False)


def get_db() -> Iterator[Session]:
    """Yield a session whose connection answered `SELECT 1`.

    Transient connectivity failures are retried; anything else, and errors
    raised by the endpoint itself, propagate unchanged.
    """

    last_exc: OperationalError | None = None
    for attempt, delay in enumerate((*RETRY_DELAYS_SECONDS, None)):
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        except OperationalError as exc:
            db.close()
            last_exc = exc
            if delay is None or not is_transient_db_connectivity_error(exc):
                break
            logger.debug("Database ping failed (attempt %d); retrying in %.1fs", attempt + 1, delay)
            time.sleep(delay)
            continue

        try:
            yield db
        finally:
            db.close()
        return

    raise DatabaseUnavailableError("Database temporarily unavailable") from last_exc
