from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from lesson_schedule.conflicts import find_conflicts
from lesson_schedule.constants import DAYS_OF_WEEK, UNKNOWN_LABEL
from lesson_schedule.directory import RoomRef, TeacherRef, room_name, teacher_name
from lesson_schedule.period_grid import PeriodGrid
from lesson_schedule.slots import PeriodId, ScheduleSlot


CellKey = tuple[str, PeriodId]


@dataclass(frozen=True)
class ProjectedSlot:
    slot: ScheduleSlot
    is_conflicting: bool
    teacher_name: str
    room_name: str | None = None


@dataclass(frozen=True)
class GridCell:
    day: str
    period: PeriodId
    entries: tuple[ProjectedSlot, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def is_conflicting(self) -> bool:
        return any(e.is_conflicting for e in self.entries)


@dataclass(frozen=True)
class GridRow:
    period: PeriodId
    label: str
    is_break: bool
    cells: tuple[GridCell, ...]


@dataclass(frozen=True)
class OccupancyCell:
    period: PeriodId
    entries: tuple[ProjectedSlot, ...] = ()

    @property
    def is_double_booked(self) -> bool:
        return len(self.entries) > 1


@dataclass(frozen=True)
class RoomOccupancyRow:
    room_id: str
    room_name: str
    room_type: str
    cells: tuple[OccupancyCell, ...] = field(default=())

    @property
    def double_booked_periods(self) -> list[PeriodId]:
        return [c.period for c in self.cells if c.is_double_booked]


def _project(
    slots: Sequence[ScheduleSlot],
    predicate: Callable[[ScheduleSlot], bool],
    *,
    teachers: Sequence[TeacherRef],
    rooms: Sequence[RoomRef],
) -> dict[CellKey, list[ProjectedSlot]]:
    # Conflicts are joined at read time against the whole schedule, not just the filtered view.
    conflicting = find_conflicts(slots)
    cells: dict[CellKey, list[ProjectedSlot]] = defaultdict(list)
    for s in slots:
        if not predicate(s):
            continue
        cells[s.time_key].append(
            ProjectedSlot(
                slot=s,
                is_conflicting=s.id in conflicting,
                teacher_name=teacher_name(teachers, s.teacher_id),
                room_name=room_name(rooms, s.room_id),
            )
        )
    return dict(cells)


def project_by_class(
    slots: Sequence[ScheduleSlot],
    class_name: str,
    *,
    teachers: Sequence[TeacherRef] = (),
    rooms: Sequence[RoomRef] = (),
) -> dict[CellKey, list[ProjectedSlot]]:
    return _project(slots, lambda s: s.class_name == class_name, teachers=teachers, rooms=rooms)


def project_by_teacher(
    slots: Sequence[ScheduleSlot],
    teacher_id: str,
    *,
    teachers: Sequence[TeacherRef] = (),
    rooms: Sequence[RoomRef] = (),
) -> dict[CellKey, list[ProjectedSlot]]:
    return _project(slots, lambda s: s.teacher_id == teacher_id, teachers=teachers, rooms=rooms)


def project_by_room(
    slots: Sequence[ScheduleSlot],
    room_id: str,
    *,
    teachers: Sequence[TeacherRef] = (),
    rooms: Sequence[RoomRef] = (),
) -> dict[CellKey, list[ProjectedSlot]]:
    return _project(slots, lambda s: s.has_room and s.room_id == room_id, teachers=teachers, rooms=rooms)


def build_grid(
    cells: dict[CellKey, list[ProjectedSlot]],
    grid: PeriodGrid,
    days: Iterable[str] = DAYS_OF_WEEK,
) -> list[GridRow]:
    """Lay a projection out as rows of the active grid, ascending by period.

    Slots on periods that are no longer in the grid are not rendered.
    """

    days = list(days)
    rows: list[GridRow] = []
    for p in grid.sorted_periods():
        row_cells = tuple(
            GridCell(day=d, period=p.identifier, entries=tuple(cells.get((d, p.identifier), ())))
            for d in days
        )
        rows.append(GridRow(period=p.identifier, label=p.label, is_break=p.is_break, cells=row_cells))
    return rows


def room_occupancy(
    slots: Sequence[ScheduleSlot],
    day: str,
    *,
    rooms: Sequence[RoomRef],
    teachers: Sequence[TeacherRef] = (),
    grid: PeriodGrid | None = None,
) -> list[RoomOccupancyRow]:
    """Every room's use on one day, grouped by room then period.

    Rooms come in directory order, followed by room ids the schedule references
    but the directory does not know. Cells with more than one slot are double-booked.
    """

    conflicting = find_conflicts(slots)
    by_room: dict[str, dict[PeriodId, list[ProjectedSlot]]] = defaultdict(lambda: defaultdict(list))
    for s in slots:
        if s.day != day or not s.has_room:
            continue
        by_room[s.room_id][s.period].append(
            ProjectedSlot(
                slot=s,
                is_conflicting=s.id in conflicting,
                teacher_name=teacher_name(teachers, s.teacher_id),
                room_name=room_name(rooms, s.room_id),
            )
        )

    row_refs: list[RoomRef] = list(rooms)
    known = {r.id for r in rooms}
    for room_id in by_room:
        if room_id not in known:
            row_refs.append(RoomRef(id=room_id, name=UNKNOWN_LABEL))
            known.add(room_id)

    rows: list[RoomOccupancyRow] = []
    for r in row_refs:
        used = by_room.get(r.id, {})
        if grid is not None:
            periods = grid.identifiers()
            periods.extend(sorted(p for p in used if p not in grid))
        else:
            periods = sorted(used, key=float)
        cells = tuple(OccupancyCell(period=p, entries=tuple(used.get(p, ()))) for p in periods)
        rows.append(RoomOccupancyRow(room_id=r.id, room_name=r.name, room_type=r.room_type, cells=cells))
    return rows
