# camp_scheduling/crud/crud_slot_booking.py
"""
Booking ledger for availability slots.

Handles booking, cancellation and rescheduling while keeping the slot's
cached counter in step with the ledger. Every operation runs in a single
transaction: the booking row and the slot counter change together or not
at all.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, case, func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from camp_scheduling.constants.scheduling import BookingStatus, SlotStatus
from camp_scheduling.core.exceptions import (
    AlreadyCancelledError,
    DuplicateBookingError,
    NotFoundError,
    SchedulingError,
    SlotFullError,
    SlotNotAvailableError,
)
from camp_scheduling.models.availability_slot import AvailabilitySlot
from camp_scheduling.models.slot_booking import SlotBooking
from camp_scheduling.services.slot_reconciler import recount_statement

logger = logging.getLogger(__name__)

RESCHEDULE_CANCEL_REASON = "Rescheduled"


class CRUDSlotBooking:
    """CRUD operations and ledger transitions for slot bookings."""

    def get(self, db: Session, id: str) -> Optional[SlotBooking]:
        return db.query(SlotBooking).filter(SlotBooking.id == id).first()

    def get_or_404(self, db: Session, id: str) -> SlotBooking:
        booking = self.get(db, id)
        if not booking:
            raise NotFoundError("Booking", id)
        return booking

    def get_confirmed_for_child(
        self,
        db: Session,
        *,
        slot_id: str,
        child_id: str,
    ) -> Optional[SlotBooking]:
        """Get a child's confirmed booking on a slot."""
        return db.query(SlotBooking).filter(
            and_(
                SlotBooking.slot_id == slot_id,
                SlotBooking.child_id == child_id,
                SlotBooking.status == BookingStatus.CONFIRMED,
            )
        ).first()

    def get_by_slot(
        self,
        db: Session,
        *,
        slot_id: str,
        status: Optional[str] = None,
    ) -> List[SlotBooking]:
        query = db.query(SlotBooking).filter(SlotBooking.slot_id == slot_id)
        if status:
            query = query.filter(SlotBooking.status == status)
        return query.order_by(SlotBooking.booking_date.asc()).all()

    def get_by_parent(self, db: Session, *, parent_id: str) -> List[SlotBooking]:
        """All bookings made by a parent, newest first."""
        return (
            db.query(SlotBooking)
            .filter(SlotBooking.parent_id == parent_id)
            .order_by(SlotBooking.booking_date.desc())
            .all()
        )

    def get_by_camp(self, db: Session, *, camp_id: str) -> List[SlotBooking]:
        """Bookings on every slot of a camp, by slot date and start time."""
        return (
            db.query(SlotBooking)
            .join(AvailabilitySlot, SlotBooking.slot_id == AvailabilitySlot.id)
            .filter(AvailabilitySlot.camp_id == camp_id)
            .order_by(
                AvailabilitySlot.slot_date.asc(),
                AvailabilitySlot.start_time.asc(),
                SlotBooking.booking_date.asc(),
            )
            .all()
        )

    def lineage(self, db: Session, *, booking_id: str) -> List[SlotBooking]:
        """Bookings this one was rescheduled from, nearest first."""
        booking = self.get_or_404(db, booking_id)
        history = []
        while booking.rescheduled_from_id:
            booking = self.get(db, booking.rescheduled_from_id)
            if booking is None:
                break
            history.append(booking)
        return history

    # ------------------------------------------------------------------ #
    # Ledger transitions (no commit; callers own the transaction)
    # ------------------------------------------------------------------ #

    def _claim_seat(
        self,
        db: Session,
        *,
        slot_id: str,
        child_id: str,
        parent_id: str,
        notes: Optional[str] = None,
        registration_id: Optional[str] = None,
        rescheduled_from_id: Optional[str] = None,
    ) -> SlotBooking:
        # Row lock where the store supports it; SQLite ignores FOR UPDATE and
        # serializes on the conditional UPDATE below instead.
        slot = (
            db.query(AvailabilitySlot)
            .filter(AvailabilitySlot.id == slot_id)
            .populate_existing()
            .with_for_update()
            .first()
        )
        if not slot:
            raise NotFoundError("Availability slot", slot_id)

        # booked <=> full, so report capacity before the generic status check
        if slot.current_bookings >= slot.max_bookings:
            raise SlotFullError(slot_id, slot.max_bookings)
        if slot.status != SlotStatus.AVAILABLE:
            raise SlotNotAvailableError(slot_id, slot.status)
        if self.get_confirmed_for_child(db, slot_id=slot_id, child_id=child_id):
            raise DuplicateBookingError(slot_id, child_id)

        # Increment only while a seat is free; zero rows affected means a
        # concurrent booking took the last seat.
        result = db.execute(
            update(AvailabilitySlot)
            .where(
                AvailabilitySlot.id == slot_id,
                AvailabilitySlot.current_bookings < AvailabilitySlot.max_bookings,
            )
            .values(
                current_bookings=AvailabilitySlot.current_bookings + 1,
                status=case(
                    (
                        AvailabilitySlot.current_bookings + 1 >= AvailabilitySlot.max_bookings,
                        SlotStatus.BOOKED,
                    ),
                    else_=SlotStatus.AVAILABLE,
                ),
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise SlotFullError(slot_id, slot.max_bookings)

        booking = SlotBooking(
            slot_id=slot_id,
            child_id=child_id,
            parent_id=parent_id,
            registration_id=registration_id,
            rescheduled_from_id=rescheduled_from_id,
            notes=notes,
            status=BookingStatus.CONFIRMED,
            booking_date=datetime.now(timezone.utc),
        )
        db.add(booking)
        try:
            db.flush()
        except IntegrityError as e:
            # The partial unique index caught a concurrent duplicate
            raise DuplicateBookingError(slot_id, child_id) from e
        return booking

    def _release_seat(
        self,
        db: Session,
        *,
        booking: SlotBooking,
        cancel_reason: Optional[str] = None,
    ) -> None:
        if booking.status == BookingStatus.CANCELLED:
            raise AlreadyCancelledError(booking.id)

        result = db.execute(
            update(SlotBooking)
            .where(
                SlotBooking.id == booking.id,
                SlotBooking.status == BookingStatus.CONFIRMED,
            )
            .values(
                status=BookingStatus.CANCELLED,
                cancelled_at=datetime.now(timezone.utc),
                cancel_reason=cancel_reason,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise AlreadyCancelledError(booking.id)

        # Recount from the ledger rather than decrementing the cache
        if booking.slot_id:
            db.execute(recount_statement([booking.slot_id]))

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #

    def book(
        self,
        db: Session,
        *,
        slot_id: str,
        child_id: str,
        parent_id: str,
        notes: Optional[str] = None,
        registration_id: Optional[str] = None,
    ) -> SlotBooking:
        """
        Atomically check capacity, create a confirmed booking and bump the
        slot counter.

        Raises:
            NotFoundError, SlotFullError, SlotNotAvailableError,
            DuplicateBookingError
        """
        try:
            booking = self._claim_seat(
                db,
                slot_id=slot_id,
                child_id=child_id,
                parent_id=parent_id,
                notes=notes,
                registration_id=registration_id,
            )
            # Commit booking + counter together
            db.commit()
        except SchedulingError as e:
            db.rollback()
            logger.info(f"Booking rejected for child {child_id}, slot {slot_id}: {e.error_code}")
            raise
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to book slot {slot_id} for child {child_id}: {str(e)}",
                exc_info=True,
                extra={"slot_id": slot_id, "child_id": child_id, "parent_id": parent_id},
            )
            db.rollback()
            raise

        db.refresh(booking)
        logger.info(f"Booking {booking.id} confirmed for child {child_id}, slot {slot_id}")
        return booking

    def cancel(
        self,
        db: Session,
        *,
        booking_id: str,
        cancel_reason: Optional[str] = None,
    ) -> SlotBooking:
        """
        Cancel a confirmed booking and recount its slot from the ledger.

        Raises:
            NotFoundError, AlreadyCancelledError
        """
        try:
            booking = self.get_or_404(db, booking_id)
            self._release_seat(db, booking=booking, cancel_reason=cancel_reason)
            db.commit()
        except SchedulingError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to cancel booking {booking_id}: {str(e)}",
                exc_info=True,
                extra={"booking_id": booking_id},
            )
            db.rollback()
            raise

        db.refresh(booking)
        logger.info(f"Booking {booking_id} cancelled")
        return booking

    def reschedule(
        self,
        db: Session,
        *,
        booking_id: str,
        new_slot_id: str,
        notes: Optional[str] = None,
    ) -> SlotBooking:
        """
        Move a confirmed booking to another slot in one transaction.

        The new booking records the old one in rescheduled_from_id; the old
        booking is cancelled with reason "Rescheduled".
        """
        try:
            old = self.get_or_404(db, booking_id)
            if old.status == BookingStatus.CANCELLED:
                raise AlreadyCancelledError(booking_id)

            new = self._claim_seat(
                db,
                slot_id=new_slot_id,
                child_id=old.child_id,
                parent_id=old.parent_id,
                notes=notes if notes is not None else old.notes,
                registration_id=old.registration_id,
                rescheduled_from_id=old.id,
            )
            self._release_seat(db, booking=old, cancel_reason=RESCHEDULE_CANCEL_REASON)
            db.commit()
        except SchedulingError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to reschedule booking {booking_id} to slot {new_slot_id}: {str(e)}",
                exc_info=True,
            )
            db.rollback()
            raise

        db.refresh(new)
        logger.info(f"Booking {booking_id} rescheduled to {new.id} on slot {new_slot_id}")
        return new


slot_booking = CRUDSlotBooking()
