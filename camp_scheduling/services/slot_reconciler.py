# camp_scheduling/services/slot_reconciler.py
"""
Repair-on-read for availability slot counters.

`current_bookings` and `status` on a slot are a cache of the booking ledger.
Partial failures or races can leave them out of step, so every read path
recounts confirmed bookings and corrects any drift before the slot is
returned. The booking ledger is always the source of truth.
"""

import logging
from typing import Dict, Iterable, List

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from camp_scheduling.constants.scheduling import BookingStatus, SlotStatus
from camp_scheduling.models.availability_slot import AvailabilitySlot
from camp_scheduling.models.slot_booking import SlotBooking

logger = logging.getLogger(__name__)


def confirmed_counts(db: Session, slot_ids: Iterable[str]) -> Dict[str, int]:
    """Confirmed booking counts for many slots in one grouped query."""
    slot_ids = list(slot_ids)
    if not slot_ids:
        return {}
    rows = (
        db.query(SlotBooking.slot_id, func.count(SlotBooking.id))
        .filter(
            SlotBooking.slot_id.in_(slot_ids),
            SlotBooking.status == BookingStatus.CONFIRMED,
        )
        .group_by(SlotBooking.slot_id)
        .all()
    )
    counts = {slot_id: 0 for slot_id in slot_ids}
    counts.update({slot_id: count for slot_id, count in rows})
    return counts


def recount_statement(slot_ids: List[str]):
    """
    Single UPDATE that rewrites counter and status from the ledger.

    Runs as one statement so it takes the row (or database) write lock
    itself; no booking can commit between the count and the write.
    Counts above capacity are clamped so the capacity check constraint holds.
    """
    confirmed = (
        select(func.count(SlotBooking.id))
        .where(
            SlotBooking.slot_id == AvailabilitySlot.id,
            SlotBooking.status == BookingStatus.CONFIRMED,
        )
        .correlate(AvailabilitySlot)
        .scalar_subquery()
    )
    return (
        update(AvailabilitySlot)
        .where(AvailabilitySlot.id.in_(slot_ids))
        .values(
            current_bookings=case(
                (confirmed > AvailabilitySlot.max_bookings, AvailabilitySlot.max_bookings),
                else_=confirmed,
            ),
            status=case(
                (confirmed >= AvailabilitySlot.max_bookings, SlotStatus.BOOKED),
                else_=SlotStatus.AVAILABLE,
            ),
            updated_at=func.now(),
        )
        .execution_options(synchronize_session=False)
    )


def _is_drifted(slot: AvailabilitySlot, true_count: int) -> bool:
    if true_count > slot.max_bookings:
        logger.error(
            f"Slot {slot.id} has {true_count} confirmed bookings for "
            f"capacity {slot.max_bookings}; counter will be clamped"
        )
    expected_count = min(true_count, slot.max_bookings)
    expected_status = SlotStatus.for_count(true_count, slot.max_bookings)
    return slot.current_bookings != expected_count or slot.status != expected_status


def reconcile_many(db: Session, slots: List[AvailabilitySlot]) -> List[AvailabilitySlot]:
    """
    Correct every drifted slot in `slots` and return the list.

    A failure to persist the correction is logged and the read still
    succeeds with the values currently stored.
    """
    counts = confirmed_counts(db, [slot.id for slot in slots])
    drifted = [slot for slot in slots if _is_drifted(slot, counts[slot.id])]
    if not drifted:
        return slots

    for slot in drifted:
        logger.warning(
            f"Reconciling slot {slot.id}: cached {slot.current_bookings} "
            f"({slot.status}), ledger {counts[slot.id]} confirmed"
        )

    try:
        db.execute(recount_statement([slot.id for slot in drifted]))
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to persist reconciliation for {len(drifted)} slot(s)",
            exc_info=True,
        )
        db.rollback()
        return slots

    for slot in drifted:
        db.refresh(slot)
    return slots


def reconcile(db: Session, slot: AvailabilitySlot) -> AvailabilitySlot:
    """Recount one slot from the ledger, persisting any correction."""
    return reconcile_many(db, [slot])[0]
