# camp_scheduling/api/v1/endpoints/bookings.py
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from camp_scheduling.api import deps
from camp_scheduling.core.exceptions import NotFoundError
from camp_scheduling.crud import crud_availability_slot, crud_camp, crud_slot_booking
from camp_scheduling.db.session import get_db
from camp_scheduling.models.slot_booking import SlotBooking
from camp_scheduling.schemas.booking import (
    SlotBooking as SlotBookingSchema,
    SlotBookingCancel,
    SlotBookingCreate,
    SlotBookingReschedule,
)
from camp_scheduling.schemas.token import TokenPayload
from camp_scheduling.utils.kafka_helpers import (
    SLOT_BOOKED,
    SLOT_BOOKING_CANCELLED,
    SLOT_BOOKING_RESCHEDULED,
    booking_event_kwargs,
    publish_slot_booking_event,
)

router = APIRouter(tags=["Slot Bookings"])


def _authorize_booking_owner(db: Session, booking: SlotBooking, current_user: TokenPayload) -> None:
    """The booking's parent or staff of the slot's camp may change it."""
    if booking.parent_id == current_user.sub:
        return
    if booking.slot is not None:
        camp = crud_camp.camp.get(db, booking.slot.camp_id)
        if camp is not None and camp.organization_id == current_user.org_id:
            return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")


@router.post(
    "/camps/{campId}/availability-slots/{slotId}/book",
    response_model=SlotBookingSchema,
    status_code=status.HTTP_201_CREATED,
)
def book_slot(
    campId: str,
    slotId: str,
    booking_in: SlotBookingCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Book a seat in a slot for a child of the calling parent."""
    crud_camp.camp.get_or_404(db, campId)
    slot = crud_availability_slot.availability_slot.get(db, slotId)
    if not slot or slot.camp_id != campId:
        raise NotFoundError("Availability slot", slotId)

    booking = crud_slot_booking.slot_booking.book(
        db=db,
        slot_id=slotId,
        child_id=booking_in.child_id,
        parent_id=current_user.sub,
        notes=booking_in.notes,
        registration_id=booking_in.registration_id,
    )
    background_tasks.add_task(
        publish_slot_booking_event, SLOT_BOOKED, **booking_event_kwargs(booking, booking.slot)
    )
    return booking


@router.post(
    "/slot-bookings/{bookingId}/cancel",
    response_model=SlotBookingSchema,
)
def cancel_booking(
    bookingId: str,
    cancel_in: SlotBookingCancel,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Cancel a confirmed booking and free its seat."""
    booking = crud_slot_booking.slot_booking.get_or_404(db, bookingId)
    _authorize_booking_owner(db, booking, current_user)

    booking = crud_slot_booking.slot_booking.cancel(
        db=db, booking_id=bookingId, cancel_reason=cancel_in.cancel_reason
    )
    background_tasks.add_task(
        publish_slot_booking_event, SLOT_BOOKING_CANCELLED, **booking_event_kwargs(booking, booking.slot)
    )
    return booking


@router.post(
    "/slot-bookings/{bookingId}/reschedule",
    response_model=SlotBookingSchema,
    status_code=status.HTTP_201_CREATED,
)
def reschedule_booking(
    bookingId: str,
    reschedule_in: SlotBookingReschedule,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Move a confirmed booking to another slot; returns the new booking."""
    booking = crud_slot_booking.slot_booking.get_or_404(db, bookingId)
    _authorize_booking_owner(db, booking, current_user)

    new_booking = crud_slot_booking.slot_booking.reschedule(
        db=db,
        booking_id=bookingId,
        new_slot_id=reschedule_in.new_slot_id,
        notes=reschedule_in.notes,
    )
    background_tasks.add_task(
        publish_slot_booking_event,
        SLOT_BOOKING_RESCHEDULED,
        **booking_event_kwargs(new_booking, new_booking.slot),
    )
    return new_booking


@router.get("/parent/bookings", response_model=List[SlotBookingSchema])
def list_my_bookings(
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """All bookings made by the calling parent, newest first."""
    return crud_slot_booking.slot_booking.get_by_parent(db=db, parent_id=current_user.sub)


@router.get("/camps/{campId}/bookings", response_model=List[SlotBookingSchema])
def list_camp_bookings(
    campId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """All bookings across a camp's slots. Staff only."""
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    return crud_slot_booking.slot_booking.get_by_camp(db=db, camp_id=campId)


@router.get(
    "/camps/{campId}/availability-slots/{slotId}/bookings",
    response_model=List[SlotBookingSchema],
)
def list_slot_bookings(
    campId: str,
    slotId: str,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    camp = crud_camp.camp.get_or_404(db, campId)
    deps.ensure_camp_staff(camp, current_user)
    crud_availability_slot.availability_slot.get_for_camp(db=db, camp_id=campId, slot_id=slotId)
    return crud_slot_booking.slot_booking.get_by_slot(db=db, slot_id=slotId, status=status_filter)


@router.get(
    "/slot-bookings/{bookingId}/lineage",
    response_model=List[SlotBookingSchema],
)
def get_booking_lineage(
    bookingId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Bookings this one was rescheduled from, nearest first."""
    booking = crud_slot_booking.slot_booking.get_or_404(db, bookingId)
    _authorize_booking_owner(db, booking, current_user)
    return crud_slot_booking.slot_booking.lineage(db=db, booking_id=bookingId)
