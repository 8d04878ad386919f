from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from typing import Union


# Integers are teaching periods; fractional values (4.5) are inserted breaks.
PeriodId = Union[int, float]


def normalize_period(value: PeriodId) -> PeriodId:
    """Collapse integral floats so 4 and 4.0 compare, hash and render the same."""

    as_float = float(value)
    if not math.isfinite(as_float):
        raise ValueError(f"period must be a finite number, got {value!r}")
    if as_float.is_integer():
        return int(as_float)
    return as_float


def is_fractional_period(value: PeriodId) -> bool:
    return not float(value).is_integer()


def new_slot_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ScheduleSlot:
    """One lesson: a class, a subject and a teacher at (day, period), optionally in a room.

    Slots are values. Editing a slot means storing a new instance with the same id.
    """

    id: str
    day: str
    period: PeriodId
    class_name: str
    subject: str
    teacher_id: str
    room_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "period", normalize_period(self.period))
        if self.room_id == "":
            object.__setattr__(self, "room_id", None)

    @property
    def has_room(self) -> bool:
        return bool(self.room_id)

    @property
    def time_key(self) -> tuple[str, PeriodId]:
        return (self.day, self.period)

    @property
    def lesson_key(self) -> tuple[str, PeriodId, str]:
        """Identity used when merging: what this class does at this hour."""
        return (self.day, self.period, self.class_name)
