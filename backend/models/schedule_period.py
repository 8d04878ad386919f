from __future__ import annotations

from sqlalchemy import Boolean, Column, Float, Text

from models.base import Base


class SchedulePeriodRow(Base):
    __tablename__ = "schedule_periods"

    identifier = Column(Float, primary_key=True)
    label = Column(Text, nullable=False, default="")
    is_break = Column(Boolean, nullable=False, default=False)
