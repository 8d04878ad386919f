from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, Index, Integer, Text
from sqlalchemy.sql import func

from models.base import Base


class ScheduleSlotRow(Base):
    __tablename__ = "schedule"

    id = Column(Text, primary_key=True)
    day = Column(Text, nullable=False)
    period = Column(Float, nullable=False)
    class_name = Column(Text, nullable=False)
    subject = Column(Text, nullable=False, default="")
    # Weak references: no foreign keys, dangling ids are legal.
    teacher_id = Column(Text, nullable=False)
    room_id = Column(Text, nullable=True)
    # Keeps the in-memory order stable across save/load.
    position = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (Index("ix_schedule_day_period", "day", "period"),)
