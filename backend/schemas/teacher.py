from __future__ import annotations

from pydantic import BaseModel, Field


class TeacherOut(BaseModel):
    id: str
    name: str
    subjects: list[str] = Field(default_factory=list)
    teaching_hours: int = 0

    class Config:
        from_attributes = True
