from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from lesson_schedule.constants import UNKNOWN_LABEL, UNKNOWN_TEACHER_ID


@dataclass(frozen=True)
class TeacherRef:
    id: str
    name: str
    subjects: tuple[str, ...] = field(default=())
    teaching_hours: int = 0


@dataclass(frozen=True)
class RoomRef:
    id: str
    name: str
    room_type: str = ""
    capacity: int = 0


def teacher_name(teachers: Iterable[TeacherRef], teacher_id: str | None) -> str:
    for t in teachers:
        if t.id == teacher_id:
            return t.name
    return UNKNOWN_LABEL


def room_name(rooms: Iterable[RoomRef], room_id: str | None) -> str | None:
    if not room_id:
        return None
    for r in rooms:
        if r.id == room_id:
            return r.name
    return UNKNOWN_LABEL


def resolve_teacher_id(teachers: Sequence[TeacherRef], name: str) -> str:
    """Exact-name lookup; unresolved names map to the sentinel id."""

    for t in teachers:
        if t.name == name:
            return t.id
    return UNKNOWN_TEACHER_ID
