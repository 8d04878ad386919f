from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from lesson_schedule.conflicts import SlotConflict, describe_conflicts, find_conflicts
from lesson_schedule.constants import UNKNOWN_TEACHER_ID
from lesson_schedule.directory import TeacherRef, resolve_teacher_id
from lesson_schedule.merge import MergeResult
from lesson_schedule.period_grid import PeriodGrid, default_period_grid
from lesson_schedule.slots import PeriodId, ScheduleSlot
from lesson_schedule.store import AssignmentStore
from services.schedule_repository import PersistenceError, ScheduleRepository
from services.suggestion_service import SuggestedSlot, SuggestionGenerator


logger = logging.getLogger(__name__)


SAVE_FAILED_WARNING = "SCHEDULE_NOT_SAVED"
GRID_SAVE_FAILED_WARNING = "PERIOD_GRID_NOT_SAVED"


@dataclass(frozen=True)
class ConflictReport:
    conflict_ids: frozenset[str]
    conflicts: tuple[SlotConflict, ...]

    @property
    def count(self) -> int:
        return len(self.conflict_ids)


@dataclass(frozen=True)
class MutationOutcome:
    persisted: bool = True
    warnings: tuple[str, ...] = ()
    merge: MergeResult | None = None


@dataclass(frozen=True)
class SuggestionOutcome:
    suggested: int
    unresolved_teachers: tuple[str, ...] = ()
    outcome: MutationOutcome = field(default_factory=MutationOutcome)

    @property
    def merge(self) -> MergeResult | None:
        return self.outcome.merge


def candidate_slots(
    suggestions: Sequence[SuggestedSlot],
    teachers: Sequence[TeacherRef],
    *,
    batch_id: str,
) -> tuple[list[ScheduleSlot], list[str]]:
    """Turn generator output into slots, resolving teacher names to ids.

    Unknown names do not abort the batch: the slot gets the sentinel teacher id
    and the name is reported back for manual correction.
    """

    slots: list[ScheduleSlot] = []
    unresolved: list[str] = []
    for idx, s in enumerate(suggestions):
        teacher_id = resolve_teacher_id(teachers, s.teacher_name)
        if teacher_id == UNKNOWN_TEACHER_ID and s.teacher_name not in unresolved:
            unresolved.append(s.teacher_name)
        slots.append(
            ScheduleSlot(
                id=f"ai-gen-{batch_id}-{idx}",
                day=s.day,
                period=s.period,
                class_name=s.class_name,
                subject=s.subject,
                teacher_id=teacher_id,
            )
        )
    return slots, unresolved


class ScheduleSession:
    """Owns the current schedule of one editing session.

    Every mutation is applied in memory first, then handed to the repository.
    A failed save is reported as a warning and never rolled back: memory stays
    the source of truth until the next successful save.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        *,
        store: AssignmentStore | None = None,
        grid: PeriodGrid | None = None,
    ) -> None:
        self.repository = repository
        self.store = store if store is not None else AssignmentStore()
        self.grid = grid if grid is not None else default_period_grid()
        self._lock = threading.RLock()

    # Loading

    def load(self) -> bool:
        """Fetch slots and periods; keep the cached state on failure."""

        ok = True
        with self._lock:
            try:
                slots = self.repository.load_schedule()
                self.store.replace_all(slots)
                logger.info("Loaded schedule (%d slots)", len(slots))
            except PersistenceError:
                ok = False
                logger.warning("Schedule load failed; keeping %d cached slots", len(self.store), exc_info=True)

            try:
                periods = self.repository.load_periods()
                if periods is not None:
                    self.grid = PeriodGrid(periods)
            except PersistenceError:
                ok = False
                logger.warning("Period grid load failed; keeping current grid", exc_info=True)
        return ok

    # Reads

    def slots(self) -> tuple[ScheduleSlot, ...]:
        return self.store.snapshot()

    def conflicts(self) -> ConflictReport:
        # Recomputed from the live store on every call.
        snapshot = self.store.snapshot()
        return ConflictReport(
            conflict_ids=frozenset(find_conflicts(snapshot)),
            conflicts=tuple(describe_conflicts(snapshot)),
        )

    # Slot mutations

    def _save_slots(self, merge: MergeResult | None = None) -> MutationOutcome:
        if self.repository.save_schedule(self.store.snapshot()):
            return MutationOutcome(persisted=True, merge=merge)
        logger.warning("Schedule kept in memory only; save failed")
        return MutationOutcome(persisted=False, warnings=(SAVE_FAILED_WARNING,), merge=merge)

    def replace_all(self, slots: Iterable[ScheduleSlot]) -> MutationOutcome:
        with self._lock:
            self.store.replace_all(slots)
            return self._save_slots()

    def append(self, slot: ScheduleSlot) -> MutationOutcome:
        with self._lock:
            self.store.append(slot)
            return self._save_slots()

    def replace(self, slot: ScheduleSlot) -> MutationOutcome:
        with self._lock:
            self.store.replace(slot)
            return self._save_slots()

    def remove(self, slot_id: str) -> tuple[ScheduleSlot, MutationOutcome]:
        with self._lock:
            removed = self.store.remove_by_id(slot_id)
            return removed, self._save_slots()

    def merge(self, candidates: Iterable[ScheduleSlot]) -> MutationOutcome:
        with self._lock:
            result = self.store.upsert_batch(candidates)
            for old in result.superseded:
                logger.info(
                    "Slot %s superseded (%s %s %s, teacher=%s)",
                    old.id,
                    old.day,
                    old.period,
                    old.class_name,
                    old.teacher_id,
                )
            if not result.changed:
                return MutationOutcome(persisted=True, merge=result)
            return self._save_slots(merge=result)

    def apply_suggestions(
        self,
        generator: SuggestionGenerator,
        *,
        teachers: Sequence[TeacherRef],
        class_names: Sequence[str],
        days: Sequence[str],
        batch_id: str | None = None,
    ) -> SuggestionOutcome:
        """Run the generator and merge its batch.

        Generator errors propagate and leave the store untouched. The generator
        runs outside the lock; only the merge is serialised.
        """

        suggestions = generator(teachers, class_names, days)
        if not suggestions:
            logger.info("Suggestion generator returned no slots")
            return SuggestionOutcome(suggested=0)

        slots, unresolved = candidate_slots(suggestions, teachers, batch_id=batch_id or str(int(time.time() * 1000)))
        if unresolved:
            logger.warning("Unresolved teacher names in suggestions: %s", ", ".join(unresolved))

        outcome = self.merge(slots)
        return SuggestionOutcome(suggested=len(slots), unresolved_teachers=tuple(unresolved), outcome=outcome)

    # Period grid mutations

    def _save_grid(self) -> MutationOutcome:
        if self.repository.save_periods(self.grid.sorted_periods()):
            return MutationOutcome(persisted=True)
        logger.warning("Period grid kept in memory only; save failed")
        return MutationOutcome(persisted=False, warnings=(GRID_SAVE_FAILED_WARNING,))

    def add_period(self, identifier: PeriodId, label: str | None = None, is_break: bool | None = None) -> MutationOutcome | None:
        with self._lock:
            if not self.grid.add_period(identifier, label=label, is_break=is_break):
                return None
            return self._save_grid()

    def remove_period(self, identifier: PeriodId) -> MutationOutcome | None:
        with self._lock:
            if not self.grid.remove_period(identifier):
                return None
            return self._save_grid()

    def update_period(self, identifier: PeriodId, *, label: str | None = None, is_break: bool | None = None) -> MutationOutcome | None:
        with self._lock:
            if identifier not in self.grid:
                return None
            if label is not None:
                self.grid.relabel(identifier, label)
            if is_break is not None:
                self.grid.set_break(identifier, is_break)
            return self._save_grid()
