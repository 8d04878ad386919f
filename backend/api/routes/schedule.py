from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_room_directory, get_schedule_session, get_suggestion_generator, get_teacher_directory
from lesson_schedule.constants import DAYS_OF_WEEK, DEFAULT_CLASS_NAMES
from lesson_schedule.directory import RoomRef, TeacherRef, teacher_name
from lesson_schedule.errors import DuplicateSlotIdError, SlotNotFoundError
from lesson_schedule.merge import MergeResult
from lesson_schedule.slots import ScheduleSlot, new_slot_id
from lesson_schedule.views import (
    ProjectedSlot,
    build_grid,
    project_by_class,
    project_by_room,
    project_by_teacher,
    room_occupancy,
)
from schemas.schedule import (
    ConflictsOut,
    GridCellOut,
    GridRowOut,
    MergeOut,
    MergeRequest,
    OccupancyCellOut,
    ProjectedSlotOut,
    ReplacedSlotOut,
    RoomOccupancyOut,
    RoomOccupancyRowOut,
    ScheduleOut,
    ScheduleSlotBase,
    ScheduleSlotCreate,
    ScheduleSlotIn,
    ScheduleSlotOut,
    ScheduleViewOut,
    SlotConflictOut,
    SlotMutationOut,
    SuggestOut,
    SuggestRequest,
)
from services.schedule_session import MutationOutcome, ScheduleSession
from services.suggestion_service import SuggestionCredentialsMissingError, SuggestionGenerationError, SuggestionGenerator


logger = logging.getLogger(__name__)


router = APIRouter()


def _slot_out(slot: ScheduleSlot) -> ScheduleSlotOut:
    return ScheduleSlotOut.model_validate(slot)


def _to_slot(payload: ScheduleSlotBase, *, slot_id: str) -> ScheduleSlot:
    return ScheduleSlot(
        id=slot_id,
        day=payload.day,
        period=payload.period,
        class_name=payload.class_name,
        subject=payload.subject.strip(),
        teacher_id=payload.teacher_id,
        room_id=payload.room_id,
    )


def _duplicate_id(exc: DuplicateSlotIdError) -> HTTPException:
    return HTTPException(status_code=409, detail={"code": "SLOT_ID_ALREADY_EXISTS", "slot_id": exc.slot_id})


def _mutation_fields(session: ScheduleSession, outcome: MutationOutcome) -> dict:
    return {
        "persisted": outcome.persisted,
        "warnings": list(outcome.warnings),
        "conflict_count": session.conflicts().count,
    }


def _merge_fields(result: MergeResult | None) -> dict:
    if result is None:
        return {"added": [], "replaced": [], "superseded": [], "total": 0}
    return {
        "added": [_slot_out(s) for s in result.added],
        "replaced": [ReplacedSlotOut(previous=_slot_out(old), current=_slot_out(new)) for old, new in result.replaced],
        "superseded": [_slot_out(s) for s in result.superseded],
        "total": len(result.slots),
    }


def _projected_out(p: ProjectedSlot) -> ProjectedSlotOut:
    return ProjectedSlotOut(
        slot=_slot_out(p.slot),
        is_conflicting=p.is_conflicting,
        teacher_name=p.teacher_name,
        room_name=p.room_name,
    )


def _view_out(session: ScheduleSession, *, mode: str, key: str, title: str, cells) -> ScheduleViewOut:
    rows = build_grid(cells, session.grid, DAYS_OF_WEEK)
    return ScheduleViewOut(
        mode=mode,
        key=key,
        title=title,
        days=list(DAYS_OF_WEEK),
        rows=[
            GridRowOut(
                period=r.period,
                label=r.label,
                is_break=r.is_break,
                cells=[
                    GridCellOut(
                        day=c.day,
                        entries=[_projected_out(e) for e in c.entries],
                        is_conflicting=c.is_conflicting,
                    )
                    for c in r.cells
                ],
            )
            for r in rows
        ],
        conflict_count=session.conflicts().count,
    )


@router.get("/slots", response_model=list[ScheduleSlotOut])
def list_slots(session: ScheduleSession = Depends(get_schedule_session)) -> list[ScheduleSlotOut]:
    return [_slot_out(s) for s in session.slots()]


@router.put("/slots", response_model=ScheduleOut)
def replace_schedule(
    payload: list[ScheduleSlotIn],
    session: ScheduleSession = Depends(get_schedule_session),
) -> ScheduleOut:
    slots = [_to_slot(p, slot_id=p.id.strip()) for p in payload]
    try:
        outcome = session.replace_all(slots)
    except DuplicateSlotIdError as exc:
        raise _duplicate_id(exc)
    return ScheduleOut(slots=[_slot_out(s) for s in session.slots()], **_mutation_fields(session, outcome))


@router.post("/slots", response_model=SlotMutationOut)
def create_slot(
    payload: ScheduleSlotCreate,
    session: ScheduleSession = Depends(get_schedule_session),
) -> SlotMutationOut:
    slot_id = (payload.id or "").strip() or new_slot_id()
    slot = _to_slot(payload, slot_id=slot_id)
    try:
        outcome = session.append(slot)
    except DuplicateSlotIdError as exc:
        raise _duplicate_id(exc)
    return SlotMutationOut(slot=_slot_out(slot), **_mutation_fields(session, outcome))


@router.put("/slots/{slot_id}", response_model=SlotMutationOut)
def put_slot(
    slot_id: str,
    payload: ScheduleSlotBase,
    session: ScheduleSession = Depends(get_schedule_session),
) -> SlotMutationOut:
    slot = _to_slot(payload, slot_id=slot_id)
    try:
        outcome = session.replace(slot)
    except SlotNotFoundError:
        raise HTTPException(status_code=404, detail="SLOT_NOT_FOUND")
    return SlotMutationOut(slot=_slot_out(slot), **_mutation_fields(session, outcome))


@router.delete("/slots/{slot_id}", response_model=SlotMutationOut)
def delete_slot(
    slot_id: str,
    session: ScheduleSession = Depends(get_schedule_session),
) -> SlotMutationOut:
    try:
        removed, outcome = session.remove(slot_id)
    except SlotNotFoundError:
        raise HTTPException(status_code=404, detail="SLOT_NOT_FOUND")
    return SlotMutationOut(slot=_slot_out(removed), **_mutation_fields(session, outcome))


@router.post("/merge", response_model=MergeOut)
def merge_batch(
    payload: MergeRequest,
    session: ScheduleSession = Depends(get_schedule_session),
) -> MergeOut:
    candidates = [_to_slot(p, slot_id=(p.id or "").strip() or new_slot_id()) for p in payload.slots]
    outcome = session.merge(candidates)
    return MergeOut(**_merge_fields(outcome.merge), **_mutation_fields(session, outcome))


@router.post("/suggest", response_model=SuggestOut)
def suggest_schedule(
    payload: SuggestRequest | None = None,
    session: ScheduleSession = Depends(get_schedule_session),
    teachers: list[TeacherRef] = Depends(get_teacher_directory),
    generator: SuggestionGenerator = Depends(get_suggestion_generator),
) -> SuggestOut:
    payload = payload or SuggestRequest()
    class_names = payload.class_names or list(DEFAULT_CLASS_NAMES)
    days = payload.days or list(DAYS_OF_WEEK)

    try:
        result = session.apply_suggestions(generator, teachers=teachers, class_names=class_names, days=days)
    except SuggestionCredentialsMissingError:
        raise HTTPException(
            status_code=503,
            detail={"code": "API_KEY_MISSING", "message": "Suggestion service API key is not configured."},
        )
    except SuggestionGenerationError as exc:
        logger.warning("Schedule suggestion failed: %s", exc)
        raise HTTPException(
            status_code=502,
            detail={"code": "SUGGESTION_FAILED", "message": "Could not get a schedule suggestion."},
        )

    if result.suggested == 0:
        return SuggestOut(
            message="No schedule suggestions returned. Try again.",
            **_merge_fields(None),
            **_mutation_fields(session, MutationOutcome()),
        )

    return SuggestOut(
        message=f"Created {result.suggested} suggested schedule slots.",
        suggested=result.suggested,
        unresolved_teachers=list(result.unresolved_teachers),
        **_merge_fields(result.merge),
        **_mutation_fields(session, result.outcome),
    )


@router.get("/conflicts", response_model=ConflictsOut)
def get_conflicts(session: ScheduleSession = Depends(get_schedule_session)) -> ConflictsOut:
    report = session.conflicts()
    return ConflictsOut(
        count=report.count,
        conflict_ids=sorted(report.conflict_ids),
        conflicts=[
            SlotConflictOut(
                conflict_type=c.conflict_type,
                severity=c.severity,
                message=c.message,
                day=c.day,
                period=c.period,
                slot_ids=list(c.slot_ids),
                teacher_id=c.teacher_id,
                room_id=c.room_id,
                details=dict(c.metadata),
            )
            for c in report.conflicts
        ],
    )


@router.get("/views/class/{class_name}", response_model=ScheduleViewOut)
def get_class_view(
    class_name: str,
    session: ScheduleSession = Depends(get_schedule_session),
    teachers: list[TeacherRef] = Depends(get_teacher_directory),
    rooms: list[RoomRef] = Depends(get_room_directory),
) -> ScheduleViewOut:
    cells = project_by_class(session.slots(), class_name, teachers=teachers, rooms=rooms)
    return _view_out(session, mode="class", key=class_name, title=f"Jadwal Pelajaran Kelas {class_name}", cells=cells)


@router.get("/views/teacher/{teacher_id}", response_model=ScheduleViewOut)
def get_teacher_view(
    teacher_id: str,
    session: ScheduleSession = Depends(get_schedule_session),
    teachers: list[TeacherRef] = Depends(get_teacher_directory),
    rooms: list[RoomRef] = Depends(get_room_directory),
) -> ScheduleViewOut:
    cells = project_by_teacher(session.slots(), teacher_id, teachers=teachers, rooms=rooms)
    title = f"Jadwal Mengajar: {teacher_name(teachers, teacher_id)}"
    return _view_out(session, mode="teacher", key=teacher_id, title=title, cells=cells)


@router.get("/views/room/{room_id}", response_model=ScheduleViewOut)
def get_room_view(
    room_id: str,
    session: ScheduleSession = Depends(get_schedule_session),
    teachers: list[TeacherRef] = Depends(get_teacher_directory),
    rooms: list[RoomRef] = Depends(get_room_directory),
) -> ScheduleViewOut:
    cells = project_by_room(session.slots(), room_id, teachers=teachers, rooms=rooms)
    name = next((r.name for r in rooms if r.id == room_id), room_id)
    return _view_out(session, mode="room", key=room_id, title=f"Jadwal Ruangan: {name}", cells=cells)


@router.get("/views/rooms", response_model=RoomOccupancyOut)
def get_room_occupancy(
    day: str = Query(default=DAYS_OF_WEEK[0]),
    session: ScheduleSession = Depends(get_schedule_session),
    teachers: list[TeacherRef] = Depends(get_teacher_directory),
    rooms: list[RoomRef] = Depends(get_room_directory),
) -> RoomOccupancyOut:
    if day not in DAYS_OF_WEEK:
        raise HTTPException(status_code=400, detail="INVALID_DAY")

    rows = room_occupancy(session.slots(), day, rooms=rooms, teachers=teachers, grid=session.grid)
    return RoomOccupancyOut(
        day=day,
        title=f"Status Penggunaan Ruangan - {day}",
        rooms=[
            RoomOccupancyRowOut(
                room_id=r.room_id,
                room_name=r.room_name,
                room_type=r.room_type,
                cells=[
                    OccupancyCellOut(
                        period=c.period,
                        entries=[_projected_out(e) for e in c.entries],
                        is_double_booked=c.is_double_booked,
                    )
                    for c in r.cells
                ],
                double_booked_periods=r.double_booked_periods,
            )
            for r in rows
        ],
    )

