from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import psycopg2
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from sqlalchemy import text
from sqlalchemy.exc import OperationalError as SAOperationalError
from sqlalchemy.exc import SQLAlchemyError

from api.router import api_router
from core.bootstrap import ensure_schema
from core.config import settings
from core.database import ENGINE, DatabaseUnavailableError, SessionLocal, is_transient_db_connectivity_error
from core.logging import setup_logging
from services.schedule_repository import SqlScheduleRepository
from services.schedule_session import ScheduleSession
from services.suggestion_service import SuggestionGenerator


logger = logging.getLogger(__name__)


_DEV_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]
_DEV_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


def _database_unavailable() -> JSONResponse:
    return _error(503, "DATABASE_UNAVAILABLE", "Database temporarily unavailable. Please retry.")


def _database_error_response(exc: BaseException) -> JSONResponse:
    if is_transient_db_connectivity_error(exc):
        logger.warning("Database transient connectivity error (503)", exc_info=exc)
        return _database_unavailable()
    logger.error("Database operation failed", exc_info=exc)
    return _error(500, "DATABASE_ERROR", "Database operation failed.")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DatabaseUnavailableError)
    def _db_unavailable(_request: Request, exc: DatabaseUnavailableError):
        logger.warning("Database unavailable (503)", exc_info=exc)
        return _database_unavailable()

    @app.exception_handler(SAOperationalError)
    def _sqlalchemy_operational_error(_request: Request, exc: SAOperationalError):
        return _database_error_response(exc)

    @app.exception_handler(psycopg2.OperationalError)
    def _psycopg2_operational_error(_request: Request, exc: psycopg2.OperationalError):
        return _database_error_response(exc)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    # Tests inject a ready session; production builds one over the database.
    if app.state.schedule_session is None:
        try:
            ensure_schema(ENGINE)
        except SQLAlchemyError:
            logger.warning("Schema bootstrap failed; the schedule will not be persisted", exc_info=True)
        session = ScheduleSession(SqlScheduleRepository(SessionLocal))
        if not session.load():
            logger.warning("Starting with an in-memory schedule; persistence is unavailable")
        app.state.schedule_session = session
    yield


def create_app(
    *,
    schedule_session: ScheduleSession | None = None,
    suggestion_generator: SuggestionGenerator | None = None,
) -> FastAPI:
    setup_logging(environment=settings.environment)
    is_production = settings.environment.lower() == "production"
    app = FastAPI(
        title="School Schedule API",
        version="0.1.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
        lifespan=_lifespan,
    )
    app.state.schedule_session = schedule_session
    app.state.suggestion_generator = suggestion_generator
    app.state.directory_cache = {}

    _register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin] + ([] if is_production else _DEV_ORIGINS),
        allow_origin_regex=None if is_production else _DEV_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        try:
            with ENGINE.connect() as conn:
                conn.execute(text("SELECT 1"))
            database = "ok"
        except Exception:
            database = "down"

        session: ScheduleSession | None = app.state.schedule_session
        return {
            "app": "ok",
            "database": database,
            "slots": len(session.store) if session is not None else 0,
            "conflicts": session.conflicts().count if session is not None else 0,
        }

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
