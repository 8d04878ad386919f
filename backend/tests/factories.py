from __future__ import annotations

from typing import Sequence

from lesson_schedule.directory import RoomRef, TeacherRef
from lesson_schedule.period_grid import Period
from lesson_schedule.slots import ScheduleSlot
from services.schedule_repository import PersistenceError


class InMemoryRepository:
    """Persistence fake: records every save and can be told to fail."""

    def __init__(self, slots: Sequence[ScheduleSlot] = (), periods: Sequence[Period] | None = None) -> None:
        self.slots = list(slots)
        # None: no grid was ever saved.
        self.periods = list(periods) if periods is not None else None
        self.fail_saves = False
        self.fail_loads = False
        self.slot_saves = 0
        self.period_saves = 0

    def load_schedule(self) -> list[ScheduleSlot]:
        if self.fail_loads:
            raise PersistenceError("load failed")
        return list(self.slots)

    def save_schedule(self, slots: Sequence[ScheduleSlot]) -> bool:
        if self.fail_saves:
            return False
        self.slot_saves += 1
        self.slots = list(slots)
        return True

    def load_periods(self) -> list[Period] | None:
        if self.fail_loads:
            raise PersistenceError("load failed")
        return list(self.periods) if self.periods is not None else None

    def save_periods(self, periods: Sequence[Period]) -> bool:
        if self.fail_saves:
            return False
        self.period_saves += 1
        self.periods = list(periods)
        return True


class StaticGenerator:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = list(result or [])
        self.error = error
        self.calls: list[tuple] = []

    def __call__(self, teachers, class_names, days):
        self.calls.append((list(teachers), list(class_names), list(days)))
        if self.error is not None:
            raise self.error
        return list(self.result)


TEACHERS = [
    TeacherRef(id="t1", name="Dra. Sri Mularsih", subjects=("Matematika",), teaching_hours=21),
    TeacherRef(id="t2", name="Tri Puji Utami, S.Kom", subjects=("Informatika",), teaching_hours=26),
    TeacherRef(id="t3", name="Agus Wuryanto, S.Pd", subjects=("Bimbingan Konseling",), teaching_hours=0),
]

ROOMS = [
    RoomRef(id="r1", name="R. 1", room_type="Teori", capacity=36),
    RoomRef(id="r2", name="R. 2", room_type="Teori", capacity=36),
    RoomRef(id="lab1", name="Lab RPL 1", room_type="Lab", capacity=36),
]


def make_slot(
    slot_id: str,
    *,
    day: str = "Senin",
    period=1,
    class_name: str = "X AKL 1",
    subject: str = "Matematika",
    teacher_id: str = "t1",
    room_id: str | None = None,
) -> ScheduleSlot:
    return ScheduleSlot(
        id=slot_id,
        day=day,
        period=period,
        class_name=class_name,
        subject=subject,
        teacher_id=teacher_id,
        room_id=room_id,
    )


