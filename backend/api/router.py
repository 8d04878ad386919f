from __future__ import annotations

from fastapi import APIRouter

from api.routes import periods, rooms, schedule, teachers


api_router = APIRouter()
api_router.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
api_router.include_router(periods.router, prefix="/schedule/periods", tags=["periods"])
api_router.include_router(teachers.router, prefix="/teachers", tags=["teachers"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
