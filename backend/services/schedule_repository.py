from __future__ import annotations

import logging
from typing import Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from models.schedule_meta import ScheduleMetaRow
from models.schedule_period import SchedulePeriodRow
from models.schedule_slot import ScheduleSlotRow
from lesson_schedule.period_grid import Period
from lesson_schedule.slots import ScheduleSlot


logger = logging.getLogger(__name__)


# Present once a period grid has been saved, even an empty one.
PERIOD_GRID_SAVED_KEY = "period_grid_saved"


class PersistenceError(RuntimeError):
    """Raised when the schedule cannot be loaded from storage."""


class ScheduleRepository(Protocol):
    def load_schedule(self) -> list[ScheduleSlot]: ...

    def save_schedule(self, slots: Sequence[ScheduleSlot]) -> bool: ...

    def load_periods(self) -> list[Period] | None: ...

    def save_periods(self, periods: Sequence[Period]) -> bool: ...


def slot_from_row(row: ScheduleSlotRow) -> ScheduleSlot:
    return ScheduleSlot(
        id=str(row.id),
        day=str(row.day),
        period=row.period,
        class_name=str(row.class_name),
        subject=str(row.subject or ""),
        teacher_id=str(row.teacher_id),
        room_id=str(row.room_id) if row.room_id else None,
    )


def row_from_slot(slot: ScheduleSlot, *, position: int) -> ScheduleSlotRow:
    return ScheduleSlotRow(
        id=slot.id,
        day=slot.day,
        period=float(slot.period),
        class_name=slot.class_name,
        subject=slot.subject,
        teacher_id=slot.teacher_id,
        room_id=slot.room_id,
        position=position,
    )


class SqlScheduleRepository:
    """Stores the whole schedule as rows of the `schedule` table.

    Saves replace the full table in one transaction; the caller always hands
    over the complete current list.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def load_schedule(self) -> list[ScheduleSlot]:
        try:
            with self._session_factory() as db:
                rows = db.execute(
                    select(ScheduleSlotRow).order_by(ScheduleSlotRow.position.asc(), ScheduleSlotRow.id.asc())
                ).scalars().all()
                return [slot_from_row(r) for r in rows]
        except Exception as exc:
            raise PersistenceError("Failed to load schedule") from exc

    def save_schedule(self, slots: Sequence[ScheduleSlot]) -> bool:
        with self._session_factory() as db:
            try:
                db.execute(delete(ScheduleSlotRow))
                db.add_all(row_from_slot(s, position=i) for i, s in enumerate(slots))
                db.commit()
            except Exception:
                db.rollback()
                logger.warning("Saving schedule failed (%d slots)", len(slots), exc_info=True)
                return False
        logger.debug("Saved schedule (%d slots)", len(slots))
        return True

    def load_periods(self) -> list[Period] | None:
        """Stored grid in ascending order, or None if no grid was ever saved."""

        try:
            with self._session_factory() as db:
                rows = db.execute(select(SchedulePeriodRow).order_by(SchedulePeriodRow.identifier.asc())).scalars().all()
                if not rows and db.get(ScheduleMetaRow, PERIOD_GRID_SAVED_KEY) is None:
                    return None
                return [Period(identifier=r.identifier, label=str(r.label or ""), is_break=bool(r.is_break)) for r in rows]
        except Exception as exc:
            raise PersistenceError("Failed to load period grid") from exc

    def save_periods(self, periods: Sequence[Period]) -> bool:
        with self._session_factory() as db:
            try:
                db.execute(delete(SchedulePeriodRow))
                db.add_all(
                    SchedulePeriodRow(identifier=float(p.identifier), label=p.label, is_break=p.is_break)
                    for p in periods
                )
                db.merge(ScheduleMetaRow(key=PERIOD_GRID_SAVED_KEY, value=str(len(periods))))
                db.commit()
            except Exception:
                db.rollback()
                logger.warning("Saving period grid failed (%d periods)", len(periods), exc_info=True)
                return False
        return True
