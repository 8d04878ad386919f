from models.base import Base
from models.room import Room
from models.schedule_meta import ScheduleMetaRow
from models.schedule_period import SchedulePeriodRow
from models.schedule_slot import ScheduleSlotRow
from models.teacher import Teacher

__all__ = [
	"Base",
	"Room",
	"ScheduleMetaRow",
	"SchedulePeriodRow",
	"ScheduleSlotRow",
	"Teacher",
]
