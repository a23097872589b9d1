# camp_scheduling/api/v1/endpoints/recurrence_patterns.py
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from camp_scheduling.api import deps
from camp_scheduling.crud import crud_camp, crud_recurrence_pattern
from camp_scheduling.db.session import get_db
from camp_scheduling.schemas.camp_session import CampSession as CampSessionSchema
from camp_scheduling.schemas.recurrence import (
    RecurrencePattern as RecurrencePatternSchema,
    RecurrencePatternCreate,
)
from camp_scheduling.schemas.token import TokenPayload

router = APIRouter(tags=["Recurrence Patterns"])


def _pattern_for_staff(db: Session, patternId: str, current_user: TokenPayload):
    pattern = crud_recurrence_pattern.recurrence_pattern.get_or_404(db, patternId)
    camp = crud_camp.camp.get_or_404(db, pattern.camp_id)
    deps.ensure_camp_staff(camp, current_user)
    return pattern


@router.post(
    "/camps/{campId}/recurrence-patterns",
    response_model=RecurrencePatternSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_pattern(
    campId: str,
    pattern_in: RecurrencePatternCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    return crud_recurrence_pattern.recurrence_pattern.create_with_camp(
        db=db, obj_in=pattern_in, camp_id=campId
    )


@router.get(
    "/camps/{campId}/recurrence-patterns",
    response_model=List[RecurrencePatternSchema],
)
def list_patterns(
    campId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    crud_camp.camp.get_or_404(db, campId)
    return crud_recurrence_pattern.recurrence_pattern.get_multi_by_camp(db=db, camp_id=campId)


@router.get(
    "/recurrence-patterns/{patternId}",
    response_model=RecurrencePatternSchema,
)
def get_pattern(
    patternId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return crud_recurrence_pattern.recurrence_pattern.get_or_404(db, patternId)


@router.post(
    "/recurrence-patterns/{patternId}/expand",
    response_model=List[CampSessionSchema],
)
def expand_pattern(
    patternId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Materialize the pattern's occurrences as camp sessions.

    Re-running only creates occurrences that do not exist yet, so the
    response is empty once the pattern is fully expanded.
    """
    _pattern_for_staff(db, patternId, current_user)
    return crud_recurrence_pattern.recurrence_pattern.expand(db=db, pattern_id=patternId)


@router.delete(
    "/recurrence-patterns/{patternId}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_pattern(
    patternId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Delete a pattern; sessions it generated are kept and detached."""
    _pattern_for_staff(db, patternId, current_user)
    crud_recurrence_pattern.recurrence_pattern.delete_pattern(db=db, pattern_id=patternId)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
