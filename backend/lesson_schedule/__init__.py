from lesson_schedule.conflicts import SlotConflict, conflict_count, describe_conflicts, find_conflicts, is_slot_conflicting
from lesson_schedule.directory import RoomRef, TeacherRef, resolve_teacher_id
from lesson_schedule.errors import DuplicateSlotIdError, ScheduleError, SlotNotFoundError
from lesson_schedule.merge import MergeResult, merge_slots
from lesson_schedule.period_grid import Period, PeriodGrid, default_period_grid
from lesson_schedule.slots import ScheduleSlot, new_slot_id, normalize_period
from lesson_schedule.store import AssignmentStore
from lesson_schedule.views import (
	GridRow,
	ProjectedSlot,
	RoomOccupancyRow,
	build_grid,
	project_by_class,
	project_by_room,
	project_by_teacher,
	room_occupancy,
)

__all__ = [
	"AssignmentStore",
	"DuplicateSlotIdError",
	"GridRow",
	"MergeResult",
	"Period",
	"PeriodGrid",
	"ProjectedSlot",
	"RoomOccupancyRow",
	"RoomRef",
	"ScheduleError",
	"ScheduleSlot",
	"SlotConflict",
	"SlotNotFoundError",
	"TeacherRef",
	"build_grid",
	"conflict_count",
	"default_period_grid",
	"describe_conflicts",
	"find_conflicts",
	"is_slot_conflicting",
	"merge_slots",
	"new_slot_id",
	"normalize_period",
	"project_by_class",
	"project_by_room",
	"project_by_teacher",
	"resolve_teacher_id",
	"room_occupancy",
]
