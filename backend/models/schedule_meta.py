from __future__ import annotations

from sqlalchemy import Column, DateTime, Text
from sqlalchemy.sql import func

from models.base import Base


class ScheduleMetaRow(Base):
    __tablename__ = "schedule_meta"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
