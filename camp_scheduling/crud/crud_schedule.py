# camp_scheduling/crud/crud_schedule.py
"""
Weekly camp schedules and their one-off exceptions.

`effective_window` answers "when does this camp run on this date": an
exception for the exact date wins over the weekly entry for that weekday,
and a cancelled exception removes the date altogether.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from camp_scheduling.constants.scheduling import ExceptionStatus
from camp_scheduling.core.exceptions import InvalidWindowError, NotFoundError
from camp_scheduling.crud.crud_camp import camp as crud_camp
from camp_scheduling.models.camp_schedule import CampSchedule
from camp_scheduling.models.schedule_exception import ScheduleException
from camp_scheduling.schemas.schedule import (
    CampScheduleCreate,
    ScheduleExceptionCreate,
    ScheduleExceptionUpdate,
)
from camp_scheduling.utils.calendar_utils import date_range, day_of_week, duration_minutes

logger = logging.getLogger(__name__)


@dataclass
class ScheduleWindow:
    """Resolved running time of a camp on one date."""

    camp_id: str
    window_date: date
    day_of_week: int
    start_time: time
    end_time: time
    source: str  # "exception" or "schedule"
    exception_id: Optional[str] = None


def _check_window(start_time: time, end_time: time) -> None:
    if duration_minutes(start_time, end_time) <= 0:
        raise InvalidWindowError(start_time, end_time)


class CRUDSchedule:

    # --- Weekly schedule ---

    def get_schedules(self, db: Session, *, camp_id: str) -> List[CampSchedule]:
        return (
            db.query(CampSchedule)
            .filter(CampSchedule.camp_id == camp_id)
            .order_by(CampSchedule.day_of_week.asc(), CampSchedule.start_time.asc())
            .all()
        )

    def create_schedule(self, db: Session, *, camp_id: str, obj_in: CampScheduleCreate) -> CampSchedule:
        crud_camp.get_or_404(db, camp_id)
        _check_window(obj_in.start_time, obj_in.end_time)
        schedule = CampSchedule(**obj_in.model_dump(), camp_id=camp_id)
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    # --- Exceptions ---

    def get_exception_or_404(self, db: Session, id: str) -> ScheduleException:
        exception = db.query(ScheduleException).filter(ScheduleException.id == id).first()
        if not exception:
            raise NotFoundError("Schedule exception", id)
        return exception

    def get_exceptions(self, db: Session, *, camp_id: str) -> List[ScheduleException]:
        return (
            db.query(ScheduleException)
            .filter(ScheduleException.camp_id == camp_id)
            .order_by(ScheduleException.exception_date.asc())
            .all()
        )

    def create_exception(
        self, db: Session, *, camp_id: str, obj_in: ScheduleExceptionCreate
    ) -> ScheduleException:
        """
        Record the exception for a date, replacing any earlier one for the
        same camp and date so the latest recorded exception always wins.
        """
        crud_camp.get_or_404(db, camp_id)
        _check_window(obj_in.start_time, obj_in.end_time)

        exception = self._exception_for(db, camp_id, obj_in.exception_date)
        if exception is None:
            exception = ScheduleException(camp_id=camp_id)
            db.add(exception)
        else:
            logger.info(f"Replacing schedule exception {exception.id} for camp {camp_id}")
        for field, value in obj_in.model_dump().items():
            setattr(exception, field, value)
        exception.day_of_week = day_of_week(obj_in.exception_date)

        try:
            db.commit()
        except IntegrityError:
            logger.error(
                f"Concurrent exception write for camp {camp_id} on {obj_in.exception_date}",
                exc_info=True,
            )
            db.rollback()
            raise
        db.refresh(exception)
        logger.info(
            f"Schedule exception {exception.id} ({exception.status}) for camp {camp_id} "
            f"on {exception.exception_date}"
        )
        return exception

    def update_exception(
        self, db: Session, *, exception_id: str, obj_in: ScheduleExceptionUpdate
    ) -> ScheduleException:
        exception = self.get_exception_or_404(db, exception_id)
        update_data = obj_in.model_dump(exclude_unset=True)
        start_time = update_data.get("start_time") or exception.start_time
        end_time = update_data.get("end_time") or exception.end_time
        _check_window(start_time, end_time)

        for field, value in update_data.items():
            if value is not None or field == "reason":
                setattr(exception, field, value)
        db.commit()
        db.refresh(exception)
        return exception

    def delete_exception(self, db: Session, *, exception_id: str) -> None:
        exception = self.get_exception_or_404(db, exception_id)
        db.delete(exception)
        db.commit()

    # --- Overlay ---

    def _exception_for(self, db: Session, camp_id: str, on: date) -> Optional[ScheduleException]:
        return (
            db.query(ScheduleException)
            .filter(
                ScheduleException.camp_id == camp_id,
                ScheduleException.exception_date == on,
            )
            .first()
        )

    def effective_window(self, db: Session, *, camp_id: str, on: date) -> Optional[ScheduleWindow]:
        """
        Effective running window of a camp on `on`, or None if it does not run.
        """
        exception = self._exception_for(db, camp_id, on)
        if exception is not None:
            if exception.status == ExceptionStatus.CANCELLED:
                return None
            return ScheduleWindow(
                camp_id=camp_id,
                window_date=on,
                day_of_week=exception.day_of_week,
                start_time=exception.start_time,
                end_time=exception.end_time,
                source="exception",
                exception_id=exception.id,
            )

        weekday = day_of_week(on)
        schedule = (
            db.query(CampSchedule)
            .filter(CampSchedule.camp_id == camp_id, CampSchedule.day_of_week == weekday)
            .order_by(CampSchedule.start_time.asc())
            .first()
        )
        if schedule is None:
            return None
        return ScheduleWindow(
            camp_id=camp_id,
            window_date=on,
            day_of_week=weekday,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            source="schedule",
        )

    def schedule_for_range(
        self, db: Session, *, camp_id: str, start: date, end: date
    ) -> List[ScheduleWindow]:
        """Effective windows for every running date in [start, end]."""
        windows = []
        for on in date_range(start, end):
            window = self.effective_window(db, camp_id=camp_id, on=on)
            if window is not None:
                windows.append(window)
        return windows


schedule = CRUDSchedule()
