from __future__ import annotations

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Integer, Text
from sqlalchemy.sql import func

from models.base import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    nip = Column(Text, nullable=True)
    status = Column(Text, nullable=True)
    subjects = Column(JSON, nullable=False, default=list)
    max_hours = Column(Integer, nullable=False, default=24)
    teaching_hours = Column(Integer, nullable=False, default=0)
    phone = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("max_hours >= 0", name="ck_teachers_max_hours"),
        CheckConstraint("teaching_hours >= 0", name="ck_teachers_teaching_hours"),
    )
