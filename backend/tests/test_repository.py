from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.bootstrap import ensure_schema
from models import Room, Teacher
from lesson_schedule.period_grid import Period
from services.directory_service import load_rooms, load_teachers
from services.schedule_repository import PersistenceError, SqlScheduleRepository
from tests.factories import make_slot


def _engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory():
    engine = _engine()
    assert ensure_schema(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


def test_schedule_round_trip_keeps_order_and_values(session_factory):
    repo = SqlScheduleRepository(session_factory)
    slots = [
        make_slot("z", period=3, room_id="r1"),
        make_slot("a", period=4.5, class_name="X AKL 2", teacher_id="unknown"),
        make_slot("m", day="Sabtu", period=1, class_name="XII TKJ 1", teacher_id="t2"),
    ]

    assert repo.save_schedule(slots)
    loaded = repo.load_schedule()

    assert loaded == slots
    assert isinstance(loaded[0].period, int)
    assert loaded[1].period == 4.5
    assert loaded[1].room_id is None


def test_save_replaces_previous_contents(session_factory):
    repo = SqlScheduleRepository(session_factory)
    repo.save_schedule([make_slot("a"), make_slot("b", period=2)])
    repo.save_schedule([make_slot("c", period=5)])

    assert [s.id for s in repo.load_schedule()] == ["c"]


def test_period_round_trip(session_factory):
    repo = SqlScheduleRepository(session_factory)
    periods = [Period(1, "07:00 - 07:45"), Period(4.5, "ISTIRAHAT", True), Period(0, "Literasi", True)]

    assert repo.save_periods(periods)

    assert repo.load_periods() == sorted(periods, key=lambda p: p.identifier)


def test_missing_tables_fail_softly_on_save_and_loudly_on_load():
    engine = _engine()
    repo = SqlScheduleRepository(sessionmaker(bind=engine, future=True))

    assert repo.save_schedule([make_slot("a")]) is False
    assert repo.save_periods([Period(1)]) is False
    with pytest.raises(PersistenceError):
        repo.load_schedule()
    with pytest.raises(PersistenceError):
        repo.load_periods()


def test_directory_lists_are_sorted_by_name(session_factory):
    with session_factory() as db:
        db.add_all(
            [
                Teacher(id="t2", name="Tri Puji Utami, S.Kom", subjects=["Informatika"], teaching_hours=26),
                Teacher(id="t1", name="Dra. Sri Mularsih", subjects=["Matematika", " "], teaching_hours=21),
                Room(id="lab1", name="Lab RPL 1", room_type="Lab", capacity=36),
                Room(id="r1", name="R. 1", capacity=32),
            ]
        )
        db.commit()

        teachers = load_teachers(db)
        rooms = load_rooms(db)

    assert [t.id for t in teachers] == ["t1", "t2"]
    assert teachers[0].subjects == ("Matematika",)
    assert teachers[1].teaching_hours == 26
    assert [(r.id, r.room_type) for r in rooms] == [("lab1", "Lab"), ("r1", "Teori")]


def test_period_grid_distinguishes_never_saved_from_emptied(session_factory):
    repo = SqlScheduleRepository(session_factory)
    assert repo.load_periods() is None

    assert repo.save_periods([Period(1, "07:00 - 07:45")])
    assert repo.save_periods([])

    assert repo.load_periods() == []


def test_non_finite_period_never_reaches_storage(session_factory):
    repo = SqlScheduleRepository(session_factory)
    with pytest.raises(ValueError):
        make_slot("bad", period=float("nan"))

    assert repo.save_schedule([make_slot("ok", period=2)])
    assert [s.id for s in repo.load_schedule()] == ["ok"]
