from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.deps import get_room_directory, get_teacher_directory
from main import create_app
from services.schedule_session import ScheduleSession
from tests.factories import ROOMS, TEACHERS, InMemoryRepository, StaticGenerator


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def session(repository: InMemoryRepository) -> ScheduleSession:
    return ScheduleSession(repository)


@pytest.fixture
def generator() -> StaticGenerator:
    return StaticGenerator()


@pytest.fixture
def client(session: ScheduleSession, generator: StaticGenerator) -> TestClient:
    app = create_app(schedule_session=session, suggestion_generator=generator)
    app.dependency_overrides[get_teacher_directory] = lambda: list(TEACHERS)
    app.dependency_overrides[get_room_directory] = lambda: list(ROOMS)
    return TestClient(app)
