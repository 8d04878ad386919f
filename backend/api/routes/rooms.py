from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_room_directory
from lesson_schedule.directory import RoomRef
from schemas.room import RoomOut


router = APIRouter()


@router.get("/", response_model=list[RoomOut])
def list_rooms(rooms: list[RoomRef] = Depends(get_room_directory)) -> list[RoomOut]:
    return [RoomOut.model_validate(r) for r in rooms]
