# camp_scheduling/crud/crud_recurrence_pattern.py
import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from camp_scheduling.constants.scheduling import PatternType, SessionStatus
from camp_scheduling.core.exceptions import InvalidPatternError, InvalidWindowError, NotFoundError
from camp_scheduling.crud.base import CRUDBase
from camp_scheduling.crud.crud_camp import camp as crud_camp
from camp_scheduling.models.camp_session import CampSession
from camp_scheduling.models.recurrence_pattern import RecurrencePattern
from camp_scheduling.schemas.recurrence import RecurrencePatternCreate
from camp_scheduling.utils.calendar_utils import duration_minutes
from camp_scheduling.utils.recurrence import expand_dates

logger = logging.getLogger(__name__)


class CRUDRecurrencePattern(CRUDBase[RecurrencePattern, RecurrencePatternCreate, RecurrencePatternCreate]):

    def get_or_404(self, db: Session, id: str) -> RecurrencePattern:
        pattern = self.get(db, id)
        if not pattern:
            raise NotFoundError("Recurrence pattern", id)
        return pattern

    def get_multi_by_camp(self, db: Session, *, camp_id: str) -> List[RecurrencePattern]:
        return (
            db.query(self.model)
            .filter(self.model.camp_id == camp_id)
            .order_by(self.model.start_date.asc())
            .all()
        )

    def create_with_camp(
        self, db: Session, *, obj_in: RecurrencePatternCreate, camp_id: str
    ) -> RecurrencePattern:
        crud_camp.get_or_404(db, camp_id)
        if obj_in.end_date < obj_in.start_date:
            raise InvalidPatternError("end_date must not be before start_date")
        if obj_in.pattern_type == PatternType.SPECIFIC_DAYS and not obj_in.days_of_week:
            raise InvalidPatternError("specific_days patterns need at least one day of week")
        if duration_minutes(obj_in.start_time, obj_in.end_time) <= 0:
            raise InvalidWindowError(obj_in.start_time, obj_in.end_time)

        data = obj_in.model_dump()
        if data["days_of_week"] is not None:
            data["days_of_week"] = sorted(set(data["days_of_week"]))
        pattern = self.model(**data, camp_id=camp_id)
        db.add(pattern)
        db.commit()
        db.refresh(pattern)
        logger.info(f"Created recurrence pattern {pattern.id} for camp {camp_id}")
        return pattern

    def expand(self, db: Session, *, pattern_id: str) -> List[CampSession]:
        """
        Materialize the sessions of a pattern.

        Occurrences already created by an earlier run (same pattern, date and
        start time) are skipped, so re-running returns only what was missing.
        All new sessions are written in one transaction.
        """
        pattern = self.get_or_404(db, pattern_id)
        dates = expand_dates(
            pattern.start_date,
            pattern.end_date,
            pattern.pattern_type,
            pattern.repeat_type,
            pattern.days_of_week,
        )

        existing = {
            row.session_date
            for row in db.query(CampSession.session_date).filter(
                CampSession.recurrence_group_id == pattern.id,
                CampSession.start_time == pattern.start_time,
            )
        }

        sessions = [
            CampSession(
                camp_id=pattern.camp_id,
                session_date=session_date,
                start_time=pattern.start_time,
                end_time=pattern.end_time,
                status=SessionStatus.ACTIVE,
                recurrence_group_id=pattern.id,
            )
            for session_date in dates
            if session_date not in existing
        ]

        try:
            db.add_all(sessions)
            pattern.last_expanded_at = datetime.now(timezone.utc)
            db.commit()
        except SQLAlchemyError:
            logger.error(
                f"Failed to expand recurrence pattern {pattern_id}; no sessions created",
                exc_info=True,
            )
            db.rollback()
            raise

        for session in sessions:
            db.refresh(session)
        logger.info(
            f"Expanded recurrence pattern {pattern_id}: {len(sessions)} new sessions, "
            f"{len(existing)} already present"
        )
        return sessions

    def delete_pattern(self, db: Session, *, pattern_id: str) -> None:
        """Delete a pattern; its sessions stay, detached from the group."""
        pattern = self.get_or_404(db, pattern_id)
        db.query(CampSession).filter(CampSession.recurrence_group_id == pattern_id).update(
            {CampSession.recurrence_group_id: None}, synchronize_session=False
        )
        db.delete(pattern)
        db.commit()


recurrence_pattern = CRUDRecurrencePattern(RecurrencePattern)
