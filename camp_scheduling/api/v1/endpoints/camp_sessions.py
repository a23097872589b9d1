# camp_scheduling/api/v1/endpoints/camp_sessions.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from camp_scheduling.api import deps
from camp_scheduling.crud import crud_camp, crud_camp_session
from camp_scheduling.db.session import get_db
from camp_scheduling.schemas.camp_session import (
    CampSession as CampSessionSchema,
    CampSessionCancel,
    CampSessionReschedule,
)
from camp_scheduling.schemas.token import TokenPayload

router = APIRouter(tags=["Camp Sessions"])


@router.get("/camps/{campId}/sessions", response_model=List[CampSessionSchema])
def list_sessions(
    campId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    crud_camp.camp.get_or_404(db, campId)
    return crud_camp_session.camp_session.get_multi_by_camp(db=db, camp_id=campId)


@router.post("/camp-sessions/{sessionId}/reschedule", response_model=CampSessionSchema)
def reschedule_session(
    sessionId: str,
    reschedule_in: CampSessionReschedule,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Move a session; a "tbd" status means the new time is not settled yet."""
    session = crud_camp_session.camp_session.get_or_404(db, sessionId)
    deps.ensure_camp_staff(crud_camp.camp.get_or_404(db, session.camp_id), current_user)
    return crud_camp_session.camp_session.reschedule(db=db, session_id=sessionId, obj_in=reschedule_in)


@router.post("/camp-sessions/{sessionId}/cancel", response_model=CampSessionSchema)
def cancel_session(
    sessionId: str,
    cancel_in: CampSessionCancel,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    session = crud_camp_session.camp_session.get_or_404(db, sessionId)
    deps.ensure_camp_staff(crud_camp.camp.get_or_404(db, session.camp_id), current_user)
    return crud_camp_session.camp_session.cancel(db=db, session_id=sessionId, obj_in=cancel_in)
