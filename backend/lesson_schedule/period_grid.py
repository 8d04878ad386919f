from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator

from lesson_schedule.constants import (
    BREAK_LABEL,
    DEFAULT_NON_TEACHING_PERIODS,
    DEFAULT_PERIODS,
    DEFAULT_TIME_LABELS,
)
from lesson_schedule.slots import PeriodId, is_fractional_period, normalize_period


@dataclass(frozen=True)
class Period:
    identifier: PeriodId
    label: str = ""
    is_break: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "identifier", normalize_period(self.identifier))


class PeriodGrid:
    """The configurable rows of the timetable.

    Stored unordered; `sorted_periods()` sorts on every read so callers always
    see ascending numeric order.
    """

    def __init__(self, periods: Iterable[Period] = ()) -> None:
        self._periods: dict[PeriodId, Period] = {}
        for p in periods:
            self._periods[p.identifier] = p

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, (int, float)) or not math.isfinite(identifier):
            return False
        return normalize_period(identifier) in self._periods

    def __len__(self) -> int:
        return len(self._periods)

    def __iter__(self) -> Iterator[Period]:
        return iter(self.sorted_periods())

    def get(self, identifier: PeriodId) -> Period | None:
        return self._periods.get(normalize_period(identifier))

    def add_period(self, identifier: PeriodId, label: str | None = None, is_break: bool | None = None) -> bool:
        key = normalize_period(identifier)
        if key in self._periods:
            return False

        fractional = is_fractional_period(key)
        if is_break is None:
            is_break = fractional
        if label is None:
            label = BREAK_LABEL if fractional else ""

        self._periods[key] = Period(identifier=key, label=label, is_break=bool(is_break))
        return True

    def remove_period(self, identifier: PeriodId) -> bool:
        # Slots that reference the period are left alone.
        return self._periods.pop(normalize_period(identifier), None) is not None

    def relabel(self, identifier: PeriodId, label: str) -> bool:
        key = normalize_period(identifier)
        current = self._periods.get(key)
        if current is None:
            return False
        self._periods[key] = Period(identifier=key, label=label, is_break=current.is_break)
        return True

    def set_break(self, identifier: PeriodId, is_break: bool) -> bool:
        key = normalize_period(identifier)
        current = self._periods.get(key)
        if current is None:
            return False
        self._periods[key] = Period(identifier=key, label=current.label, is_break=bool(is_break))
        return True

    def label_for(self, identifier: PeriodId) -> str:
        p = self.get(identifier)
        return p.label if p is not None else ""

    def is_break(self, identifier: PeriodId) -> bool:
        p = self.get(identifier)
        return bool(p and p.is_break)

    def sorted_periods(self) -> list[Period]:
        return sorted(self._periods.values(), key=lambda p: float(p.identifier))

    def identifiers(self) -> list[PeriodId]:
        return [p.identifier for p in self.sorted_periods()]


def default_period_grid() -> PeriodGrid:
    grid = PeriodGrid()
    for identifier in DEFAULT_PERIODS:
        grid.add_period(
            identifier,
            label=DEFAULT_TIME_LABELS.get(identifier, ""),
            is_break=identifier in DEFAULT_NON_TEACHING_PERIODS,
        )
    return grid
