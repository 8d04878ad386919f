from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from lesson_schedule.slots import ScheduleSlot


@dataclass(frozen=True)
class MergeResult:
    slots: tuple[ScheduleSlot, ...]
    added: tuple[ScheduleSlot, ...] = ()
    # (previous occupant, incoming slot) for every key that was overwritten.
    replaced: tuple[tuple[ScheduleSlot, ScheduleSlot], ...] = ()
    # Entries dropped because an incoming slot reused their id at another key.
    moved: tuple[ScheduleSlot, ...] = ()

    @property
    def superseded(self) -> tuple[ScheduleSlot, ...]:
        return tuple(old for old, _new in self.replaced) + self.moved

    @property
    def changed(self) -> bool:
        return bool(self.added or self.replaced or self.moved)


def _find_lesson(slots: Sequence[ScheduleSlot], key: tuple) -> int | None:
    for i, s in enumerate(slots):
        if s.lesson_key == key:
            return i
    return None


def merge_slots(existing: Sequence[ScheduleSlot], candidates: Iterable[ScheduleSlot]) -> MergeResult:
    """Reconcile a batch of proposed slots into an existing schedule.

    A candidate overwrites whatever the same class had at the same (day, period),
    whoever taught it before; otherwise it is appended. Candidates are applied in
    order, so the last one for a key wins. Conflicts are not checked here.
    """

    working: list[ScheduleSlot] = list(existing)
    added: list[ScheduleSlot] = []
    replaced: list[tuple[ScheduleSlot, ScheduleSlot]] = []
    moved: list[ScheduleSlot] = []

    for candidate in candidates:
        idx = _find_lesson(working, candidate.lesson_key)

        # The id identifies the record: reusing it elsewhere moves the record.
        kept: list[ScheduleSlot] = []
        for i, s in enumerate(working):
            if s.id == candidate.id and i != idx:
                moved.append(s)
            else:
                kept.append(s)
        if len(kept) != len(working):
            working = kept
            idx = _find_lesson(working, candidate.lesson_key)

        if idx is None:
            working.append(candidate)
            added.append(candidate)
            continue

        previous = working[idx]
        working[idx] = candidate
        if previous != candidate:
            replaced.append((previous, candidate))

    return MergeResult(
        slots=tuple(working),
        added=tuple(added),
        replaced=tuple(replaced),
        moved=tuple(moved),
    )
