from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path

from api.deps import get_schedule_session
from schemas.schedule import PeriodGridOut, PeriodIn, PeriodOut, PeriodUpdate
from services.schedule_session import MutationOutcome, ScheduleSession


router = APIRouter()


def _clean_label(label: str | None) -> str | None:
    return label.strip() if label is not None else None


def _grid_out(session: ScheduleSession, outcome: MutationOutcome | None = None) -> PeriodGridOut:
    outcome = outcome or MutationOutcome()
    return PeriodGridOut(
        periods=[PeriodOut(identifier=p.identifier, label=p.label, is_break=p.is_break) for p in session.grid.sorted_periods()],
        persisted=outcome.persisted,
        warnings=list(outcome.warnings),
        conflict_count=session.conflicts().count,
    )


@router.get("/", response_model=PeriodGridOut)
def list_periods(session: ScheduleSession = Depends(get_schedule_session)) -> PeriodGridOut:
    return _grid_out(session)


@router.post("/", response_model=PeriodGridOut)
def add_period(
    payload: PeriodIn,
    session: ScheduleSession = Depends(get_schedule_session),
) -> PeriodGridOut:
    outcome = session.add_period(payload.identifier, label=_clean_label(payload.label), is_break=payload.is_break)
    if outcome is None:
        raise HTTPException(status_code=409, detail="PERIOD_ALREADY_EXISTS")
    return _grid_out(session, outcome)


@router.patch("/{identifier}", response_model=PeriodGridOut)
def update_period(
    payload: PeriodUpdate,
    identifier: float = Path(ge=0, allow_inf_nan=False),
    session: ScheduleSession = Depends(get_schedule_session),
) -> PeriodGridOut:
    updates = payload.model_dump(exclude_unset=True)
    outcome = session.update_period(identifier, label=_clean_label(updates.get("label")), is_break=updates.get("is_break"))
    if outcome is None:
        raise HTTPException(status_code=404, detail="PERIOD_NOT_FOUND")
    return _grid_out(session, outcome)


@router.delete("/{identifier}", response_model=PeriodGridOut)
def delete_period(
    identifier: float = Path(ge=0, allow_inf_nan=False),
    session: ScheduleSession = Depends(get_schedule_session),
) -> PeriodGridOut:
    # Slots on the removed row stay in the schedule; they are just not rendered.
    outcome = session.remove_period(identifier)
    if outcome is None:
        raise HTTPException(status_code=404, detail="PERIOD_NOT_FOUND")
    return _grid_out(session, outcome)
