from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Text
from sqlalchemy.sql import func

from models.base import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    room_type = Column("type", Text, nullable=False, default="Teori")
    capacity = Column(Integer, nullable=False, default=0)
    allocation = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (CheckConstraint("capacity >= 0", name="ck_rooms_capacity"),)
