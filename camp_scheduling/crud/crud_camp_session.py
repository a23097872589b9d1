# camp_scheduling/crud/crud_camp_session.py
from typing import List

from sqlalchemy.orm import Session

from camp_scheduling.constants.scheduling import SessionStatus
from camp_scheduling.core.exceptions import InvalidWindowError, NotFoundError
from camp_scheduling.models.camp_session import CampSession
from camp_scheduling.schemas.camp_session import CampSessionCancel, CampSessionReschedule
from camp_scheduling.utils.calendar_utils import duration_minutes


class CRUDCampSession:
    """Concrete camp occurrences: listing, rescheduling and cancelling."""

    def get_or_404(self, db: Session, id: str) -> CampSession:
        session = db.query(CampSession).filter(CampSession.id == id).first()
        if not session:
            raise NotFoundError("Camp session", id)
        return session

    def get_multi_by_camp(self, db: Session, *, camp_id: str) -> List[CampSession]:
        return (
            db.query(CampSession)
            .filter(CampSession.camp_id == camp_id)
            .order_by(CampSession.session_date.asc(), CampSession.start_time.asc())
            .all()
        )

    def reschedule(self, db: Session, *, session_id: str, obj_in: CampSessionReschedule) -> CampSession:
        session = self.get_or_404(db, session_id)
        start = obj_in.rescheduled_start_time
        end = obj_in.rescheduled_end_time
        if start and end and duration_minutes(start, end) <= 0:
            raise InvalidWindowError(start, end)

        session.status = SessionStatus.RESCHEDULED
        session.rescheduled_date = obj_in.rescheduled_date
        session.rescheduled_start_time = start
        session.rescheduled_end_time = end
        session.rescheduled_status = obj_in.rescheduled_status
        if obj_in.notes is not None:
            session.notes = obj_in.notes
        db.commit()
        db.refresh(session)
        return session

    def cancel(self, db: Session, *, session_id: str, obj_in: CampSessionCancel) -> CampSession:
        session = self.get_or_404(db, session_id)
        session.status = SessionStatus.CANCELLED
        if obj_in.notes is not None:
            session.notes = obj_in.notes
        db.commit()
        db.refresh(session)
        return session


camp_session = CRUDCampSession()
