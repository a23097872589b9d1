# camp_scheduling/api/v1/endpoints/schedules.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from camp_scheduling.api import deps
from camp_scheduling.crud import crud_camp, crud_schedule
from camp_scheduling.db.session import get_db
from camp_scheduling.schemas.schedule import (
    CampSchedule as CampScheduleSchema,
    CampScheduleCreate,
    EffectiveWindow,
    ScheduleException as ScheduleExceptionSchema,
    ScheduleExceptionCreate,
    ScheduleExceptionUpdate,
)
from camp_scheduling.schemas.token import TokenPayload

router = APIRouter(tags=["Schedules"])


@router.get("/camps/{campId}/schedules", response_model=List[CampScheduleSchema])
def list_schedules(
    campId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    crud_camp.camp.get_or_404(db, campId)
    return crud_schedule.schedule.get_schedules(db=db, camp_id=campId)


@router.post(
    "/camps/{campId}/schedules",
    response_model=CampScheduleSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_schedule(
    campId: str,
    schedule_in: CampScheduleCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Add a weekly running window for one day of the week."""
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    return crud_schedule.schedule.create_schedule(db=db, camp_id=campId, obj_in=schedule_in)


@router.get(
    "/camps/{campId}/schedule-exceptions",
    response_model=List[ScheduleExceptionSchema],
)
def list_exceptions(
    campId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    crud_camp.camp.get_or_404(db, campId)
    return crud_schedule.schedule.get_exceptions(db=db, camp_id=campId)


@router.post(
    "/camps/{campId}/schedule-exceptions",
    response_model=ScheduleExceptionSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_exception(
    campId: str,
    exception_in: ScheduleExceptionCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Override or cancel the camp's weekly schedule on one date."""
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    return crud_schedule.schedule.create_exception(db=db, camp_id=campId, obj_in=exception_in)


@router.patch(
    "/schedule-exceptions/{exceptionId}",
    response_model=ScheduleExceptionSchema,
)
def update_exception(
    exceptionId: str,
    exception_in: ScheduleExceptionUpdate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    exception = crud_schedule.schedule.get_exception_or_404(db, exceptionId)
    deps.ensure_camp_staff(crud_camp.camp.get_or_404(db, exception.camp_id), current_user)
    return crud_schedule.schedule.update_exception(db=db, exception_id=exceptionId, obj_in=exception_in)


@router.delete(
    "/schedule-exceptions/{exceptionId}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_exception(
    exceptionId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    exception = crud_schedule.schedule.get_exception_or_404(db, exceptionId)
    deps.ensure_camp_staff(crud_camp.camp.get_or_404(db, exception.camp_id), current_user)
    crud_schedule.schedule.delete_exception(db=db, exception_id=exceptionId)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/camps/{campId}/effective-window",
    response_model=Optional[EffectiveWindow],
)
def get_effective_window(
    campId: str,
    on: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Running window of the camp on a date; null when it does not run."""
    crud_camp.camp.get_or_404(db, campId)
    return crud_schedule.schedule.effective_window(db=db, camp_id=campId, on=on)


@router.get("/camps/{campId}/schedule", response_model=List[EffectiveWindow])
def get_schedule_for_range(
    campId: str,
    start: date,
    end: date,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Effective windows for every running date between start and end."""
    crud_camp.camp.get_or_404(db, campId)
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="end must not be before start"
        )
    return crud_schedule.schedule.schedule_for_range(db=db, camp_id=campId, start=start, end=end)
