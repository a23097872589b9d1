# camp_scheduling/api/v1/endpoints/availability_slots.py
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from camp_scheduling.api import deps
from camp_scheduling.crud import crud_availability_slot, crud_camp
from camp_scheduling.db.session import get_db
from camp_scheduling.schemas.slot import (
    AvailabilitySlot as AvailabilitySlotSchema,
    AvailabilitySlotCreate,
    AvailabilitySlotUpdate,
    RecurringSlotCreate,
    SlotLineage,
)
from camp_scheduling.schemas.token import TokenPayload

router = APIRouter(tags=["Availability Slots"])


@router.post(
    "/camps/{campId}/availability-slots",
    response_model=AvailabilitySlotSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_slot(
    campId: str,
    slot_in: AvailabilitySlotCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Create a bookable time window for a camp."""
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    return crud_availability_slot.availability_slot.create_with_camp(
        db=db, obj_in=slot_in, camp_id=campId, creator_id=current_user.sub
    )


@router.post(
    "/camps/{campId}/availability-slots/recurring",
    response_model=List[AvailabilitySlotSchema],
    status_code=status.HTTP_201_CREATED,
)
def create_recurring_slots(
    campId: str,
    slot_in: RecurringSlotCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Create one slot per occurrence of a daily, weekly or biweekly rule."""
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    return crud_availability_slot.availability_slot.create_recurring(
        db=db, obj_in=slot_in, camp_id=campId, creator_id=current_user.sub
    )


@router.get(
    "/camps/{campId}/availability-slots",
    response_model=List[AvailabilitySlotSchema],
)
def list_slots(
    campId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """List a camp's slots ordered by date and start time."""
    return crud_availability_slot.availability_slot.list_by_camp(db=db, camp_id=campId)


@router.get(
    "/camps/{campId}/availability-slots/{slotId}",
    response_model=AvailabilitySlotSchema,
)
def get_slot(
    campId: str,
    slotId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return crud_availability_slot.availability_slot.get_for_camp(
        db=db, camp_id=campId, slot_id=slotId
    )


@router.patch(
    "/camps/{campId}/availability-slots/{slotId}",
    response_model=AvailabilitySlotSchema,
)
def update_slot(
    campId: str,
    slotId: str,
    slot_in: AvailabilitySlotUpdate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Update a slot's window, capacity, notes or buffers."""
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    crud_availability_slot.availability_slot.get_for_camp(db=db, camp_id=campId, slot_id=slotId)
    return crud_availability_slot.availability_slot.update_slot(db=db, slot_id=slotId, obj_in=slot_in)


@router.delete(
    "/camps/{campId}/availability-slots/{slotId}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_slot(
    campId: str,
    slotId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Delete a slot that holds no confirmed bookings."""
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    crud_availability_slot.availability_slot.get_for_camp(db=db, camp_id=campId, slot_id=slotId)
    crud_availability_slot.availability_slot.delete_slot(db=db, slot_id=slotId)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/camps/{campId}/availability-slots/{slotId}/lineage",
    response_model=SlotLineage,
)
def get_slot_lineage(
    campId: str,
    slotId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Slots this one was generated from, nearest first."""
    crud_availability_slot.availability_slot.get_for_camp(db=db, camp_id=campId, slot_id=slotId)
    ancestors = crud_availability_slot.availability_slot.lineage(db=db, slot_id=slotId)
    return SlotLineage(
        slot_id=slotId,
        ancestors=[AvailabilitySlotSchema.model_validate(s) for s in ancestors],
    )
