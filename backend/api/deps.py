from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, TypeVar

from fastapi import HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.database import DatabaseUnavailableError, get_db
from lesson_schedule.directory import RoomRef, TeacherRef
from services.directory_service import load_rooms, load_teachers
from services.schedule_session import ScheduleSession
from services.suggestion_service import GeminiScheduleSuggester, SuggestionGenerator


logger = logging.getLogger(__name__)

T = TypeVar("T")

db_session = contextmanager(get_db)


def get_schedule_session(request: Request) -> ScheduleSession:
    session = getattr(request.app.state, "schedule_session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="SCHEDULE_NOT_READY")
    return session


def _cached_directory(request: Request, key: str, loader: Callable[[Session], list[T]]) -> list[T]:
    """Load a directory list, falling back to the last good copy while the database is down.

    Views only use the directories for display names; unknown ids render as "Unknown".
    """

    cache: dict = request.app.state.directory_cache
    try:
        with db_session() as db:
            items = loader(db)
    except (DatabaseUnavailableError, SQLAlchemyError):
        logger.warning("Could not load %s; using %d cached entries", key, len(cache.get(key, ())), exc_info=True)
        return list(cache.get(key, ()))
    cache[key] = items
    return items


def get_teacher_directory(request: Request) -> list[TeacherRef]:
    return _cached_directory(request, "teachers", load_teachers)


def get_room_directory(request: Request) -> list[RoomRef]:
    return _cached_directory(request, "rooms", load_rooms)


def get_suggestion_generator(request: Request) -> SuggestionGenerator:
    generator = getattr(request.app.state, "suggestion_generator", None)
    if generator is None:
        generator = GeminiScheduleSuggester.from_settings()
    return generator
