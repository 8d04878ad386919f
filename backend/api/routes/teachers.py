from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_teacher_directory
from lesson_schedule.directory import TeacherRef
from schemas.teacher import TeacherOut


router = APIRouter()


@router.get("/", response_model=list[TeacherOut])
def list_teachers(teachers: list[TeacherRef] = Depends(get_teacher_directory)) -> list[TeacherOut]:
    return [
        TeacherOut(id=t.id, name=t.name, subjects=list(t.subjects), teaching_hours=t.teaching_hours)
        for t in teachers
    ]
