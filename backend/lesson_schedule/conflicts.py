from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from lesson_schedule.slots import PeriodId, ScheduleSlot


TEACHER_DOUBLE_BOOKED = "TEACHER_DOUBLE_BOOKED"
ROOM_DOUBLE_BOOKED = "ROOM_DOUBLE_BOOKED"


@dataclass(frozen=True)
class SlotConflict:
    conflict_type: str
    message: str
    day: str
    period: PeriodId
    slot_ids: tuple[str, ...]
    teacher_id: str | None = None
    room_id: str | None = None
    severity: str = "ERROR"
    metadata: dict = field(default_factory=dict)


def _bucket_by_time(slots: Iterable[ScheduleSlot]) -> dict[tuple[str, PeriodId], list[ScheduleSlot]]:
    buckets: dict[tuple[str, PeriodId], list[ScheduleSlot]] = defaultdict(list)
    for s in slots:
        buckets[s.time_key].append(s)
    return buckets


def _colliding_groups(bucket: Sequence[ScheduleSlot], key) -> dict[str, list[ScheduleSlot]]:
    groups: dict[str, list[ScheduleSlot]] = defaultdict(list)
    for s in bucket:
        k = key(s)
        if k is not None:
            groups[k].append(s)
    # A group collides only if it holds two distinct slot ids.
    return {k: g for k, g in groups.items() if len({s.id for s in g}) > 1}


def _teacher_key(slot: ScheduleSlot) -> str:
    # Unresolved teachers share the sentinel id and therefore collide with each other.
    return slot.teacher_id


def _room_key(slot: ScheduleSlot) -> str | None:
    return slot.room_id if slot.has_room else None


def find_conflicts(slots: Iterable[ScheduleSlot]) -> set[str]:
    """Return the ids of every slot that shares (day, period) with another slot
    on the same teacher or on the same non-empty room.

    Symmetric: both sides of a collision are reported, nothing is resolved.
    """

    conflicting: set[str] = set()
    for bucket in _bucket_by_time(slots).values():
        if len(bucket) < 2:
            continue
        for key in (_teacher_key, _room_key):
            for group in _colliding_groups(bucket, key).values():
                conflicting.update(s.id for s in group)
    return conflicting


def is_slot_conflicting(slots: Iterable[ScheduleSlot], slot: ScheduleSlot) -> bool:
    for other in slots:
        if other.id == slot.id or other.time_key != slot.time_key:
            continue
        if other.teacher_id == slot.teacher_id:
            return True
        if slot.has_room and other.room_id == slot.room_id:
            return True
    return False


def conflict_count(slots: Iterable[ScheduleSlot]) -> int:
    return len(find_conflicts(slots))


def describe_conflicts(slots: Iterable[ScheduleSlot]) -> list[SlotConflict]:
    """One record per double-booked teacher or room per (day, period)."""

    conflicts: list[SlotConflict] = []
    for (day, period), bucket in _bucket_by_time(slots).items():
        if len(bucket) < 2:
            continue

        for teacher_id, group in _colliding_groups(bucket, _teacher_key).items():
            classes = sorted({s.class_name for s in group})
            conflicts.append(
                SlotConflict(
                    conflict_type=TEACHER_DOUBLE_BOOKED,
                    message=f"Teacher is scheduled for {len(group)} lessons at the same time.",
                    day=day,
                    period=period,
                    slot_ids=tuple(s.id for s in group),
                    teacher_id=teacher_id,
                    metadata={"class_names": classes},
                )
            )

        for room_id, group in _colliding_groups(bucket, _room_key).items():
            classes = sorted({s.class_name for s in group})
            conflicts.append(
                SlotConflict(
                    conflict_type=ROOM_DOUBLE_BOOKED,
                    message=f"Room is occupied by {len(group)} lessons at the same time.",
                    day=day,
                    period=period,
                    slot_ids=tuple(s.id for s in group),
                    room_id=room_id,
                    metadata={"class_names": classes},
                )
            )

    return conflicts
