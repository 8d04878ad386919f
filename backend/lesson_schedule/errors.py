from __future__ import annotations


class ScheduleError(Exception):
    """Base class for schedule core errors."""


class DuplicateSlotIdError(ScheduleError):
    def __init__(self, slot_id: str) -> None:
        super().__init__(f"slot id already present: {slot_id!r}")
        self.slot_id = slot_id


class SlotNotFoundError(ScheduleError):
    def __init__(self, slot_id: str) -> None:
        super().__init__(f"slot not found: {slot_id!r}")
        self.slot_id = slot_id
