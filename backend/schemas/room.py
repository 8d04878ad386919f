from __future__ import annotations

from pydantic import BaseModel


class RoomOut(BaseModel):
    id: str
    name: str
    room_type: str
    capacity: int = 0

    class Config:
        from_attributes = True
