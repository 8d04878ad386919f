from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.room import Room
from models.teacher import Teacher
from lesson_schedule.directory import RoomRef, TeacherRef


def teacher_ref(row: Teacher) -> TeacherRef:
    return TeacherRef(
        id=str(row.id),
        name=str(row.name),
        subjects=tuple(str(s) for s in (row.subjects or []) if str(s).strip()),
        teaching_hours=int(row.teaching_hours or 0),
    )


def room_ref(row: Room) -> RoomRef:
    return RoomRef(
        id=str(row.id),
        name=str(row.name),
        room_type=str(row.room_type or ""),
        capacity=int(row.capacity or 0),
    )


def load_teachers(db: Session) -> list[TeacherRef]:
    rows = db.execute(select(Teacher).order_by(Teacher.name.asc())).scalars().all()
    return [teacher_ref(r) for r in rows]


def load_rooms(db: Session) -> list[RoomRef]:
    rows = db.execute(select(Room).order_by(Room.name.asc())).scalars().all()
    return [room_ref(r) for r in rows]
