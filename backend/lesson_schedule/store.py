from __future__ import annotations

from typing import Iterable, Iterator

from lesson_schedule.errors import DuplicateSlotIdError, SlotNotFoundError
from lesson_schedule.merge import MergeResult, merge_slots
from lesson_schedule.slots import ScheduleSlot


class AssignmentStore:
    """Ordered collection of schedule slots, unique by id.

    Writes are accepted whether or not they create conflicts; only id
    uniqueness is enforced. Teacher and room ids are not checked either.
    """

    def __init__(self, slots: Iterable[ScheduleSlot] = ()) -> None:
        self._slots: list[ScheduleSlot] = []
        self.replace_all(slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[ScheduleSlot]:
        return iter(tuple(self._slots))

    def __contains__(self, slot_id: object) -> bool:
        return any(s.id == slot_id for s in self._slots)

    def snapshot(self) -> tuple[ScheduleSlot, ...]:
        return tuple(self._slots)

    def get(self, slot_id: str) -> ScheduleSlot | None:
        for s in self._slots:
            if s.id == slot_id:
                return s
        return None

    def _index_of(self, slot_id: str) -> int:
        for i, s in enumerate(self._slots):
            if s.id == slot_id:
                return i
        raise SlotNotFoundError(slot_id)

    def replace_all(self, slots: Iterable[ScheduleSlot]) -> None:
        incoming = list(slots)
        seen: set[str] = set()
        for s in incoming:
            if s.id in seen:
                raise DuplicateSlotIdError(s.id)
            seen.add(s.id)
        self._slots = incoming

    def append(self, slot: ScheduleSlot) -> None:
        if slot.id in self:
            raise DuplicateSlotIdError(slot.id)
        self._slots.append(slot)

    def replace(self, slot: ScheduleSlot) -> ScheduleSlot:
        idx = self._index_of(slot.id)
        previous = self._slots[idx]
        self._slots[idx] = slot
        return previous

    def remove_by_id(self, slot_id: str) -> ScheduleSlot:
        idx = self._index_of(slot_id)
        return self._slots.pop(idx)

    def upsert_batch(self, candidates: Iterable[ScheduleSlot]) -> MergeResult:
        result = merge_slots(self._slots, candidates)
        self._slots = list(result.slots)
        return result
