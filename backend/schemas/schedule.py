from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, Field, NonNegativeInt, field_validator

from lesson_schedule.constants import DAYS_OF_WEEK


def _check_day(v: str) -> str:
    v = (v or "").strip()
    if v not in DAYS_OF_WEEK:
        raise ValueError(f"day must be one of {', '.join(DAYS_OF_WEEK)}")
    return v


# Finite and non-negative; integral input stays an int.
PeriodNumber = Union[NonNegativeInt, Annotated[float, Field(ge=0, allow_inf_nan=False)]]


class ScheduleSlotBase(BaseModel):
    day: str
    period: PeriodNumber
    class_name: str = Field(min_length=1)
    subject: str = ""
    teacher_id: str = Field(min_length=1)
    room_id: str | None = None

    @field_validator("day")
    @classmethod
    def _validate_day(cls, v: str) -> str:
        return _check_day(v)

    @field_validator("class_name", "teacher_id")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("room_id")
    @classmethod
    def _normalize_room_id(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ScheduleSlotCreate(ScheduleSlotBase):
    # Assigned server-side when omitted.
    id: str | None = None


class ScheduleSlotIn(ScheduleSlotBase):
    id: str = Field(min_length=1)


class ScheduleSlotOut(BaseModel):
    id: str
    day: str
    period: int | float
    class_name: str
    subject: str
    teacher_id: str
    room_id: str | None = None

    class Config:
        from_attributes = True


class MutationOut(BaseModel):
    persisted: bool = True
    warnings: list[str] = Field(default_factory=list)
    conflict_count: int = 0


class SlotMutationOut(MutationOut):
    slot: ScheduleSlotOut | None = None


class ScheduleOut(MutationOut):
    slots: list[ScheduleSlotOut] = Field(default_factory=list)


class MergeRequest(BaseModel):
    slots: list[ScheduleSlotCreate] = Field(default_factory=list)


class ReplacedSlotOut(BaseModel):
    previous: ScheduleSlotOut
    current: ScheduleSlotOut


class MergeOut(MutationOut):
    added: list[ScheduleSlotOut] = Field(default_factory=list)
    replaced: list[ReplacedSlotOut] = Field(default_factory=list)
    superseded: list[ScheduleSlotOut] = Field(default_factory=list)
    total: int = 0


class SuggestRequest(BaseModel):
    class_names: list[str] | None = None
    days: list[str] | None = None

    @field_validator("days")
    @classmethod
    def _validate_days(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [_check_day(d) for d in v]


class SuggestOut(MergeOut):
    suggested: int = 0
    unresolved_teachers: list[str] = Field(default_factory=list)
    message: str


class SlotConflictOut(BaseModel):
    conflict_type: str
    severity: str = "ERROR"
    message: str
    day: str
    period: int | float
    slot_ids: list[str]
    teacher_id: str | None = None
    room_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class ConflictsOut(BaseModel):
    count: int
    conflict_ids: list[str]
    conflicts: list[SlotConflictOut] = Field(default_factory=list)


class PeriodIn(BaseModel):
    identifier: PeriodNumber
    label: str | None = None
    is_break: bool | None = None


class PeriodUpdate(BaseModel):
    label: str | None = None
    is_break: bool | None = None


class PeriodOut(BaseModel):
    identifier: int | float
    label: str
    is_break: bool


class PeriodGridOut(MutationOut):
    periods: list[PeriodOut] = Field(default_factory=list)


class ProjectedSlotOut(BaseModel):
    slot: ScheduleSlotOut
    is_conflicting: bool
    teacher_name: str
    room_name: str | None = None


class GridCellOut(BaseModel):
    day: str
    entries: list[ProjectedSlotOut] = Field(default_factory=list)
    is_conflicting: bool = False


class GridRowOut(BaseModel):
    period: int | float
    label: str
    is_break: bool
    cells: list[GridCellOut] = Field(default_factory=list)


class ScheduleViewOut(BaseModel):
    mode: str
    key: str
    title: str
    days: list[str]
    rows: list[GridRowOut] = Field(default_factory=list)
    conflict_count: int = 0


class OccupancyCellOut(BaseModel):
    period: int | float
    entries: list[ProjectedSlotOut] = Field(default_factory=list)
    is_double_booked: bool = False


class RoomOccupancyRowOut(BaseModel):
    room_id: str
    room_name: str
    room_type: str
    cells: list[OccupancyCellOut] = Field(default_factory=list)
    double_booked_periods: list[int | float] = Field(default_factory=list)


class RoomOccupancyOut(BaseModel):
    day: str
    title: str
    rooms: list[RoomOccupancyRowOut] = Field(default_factory=list)
