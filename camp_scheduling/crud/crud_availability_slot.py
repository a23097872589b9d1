# camp_scheduling/crud/crud_availability_slot.py
"""
CRUD operations for availability slots.

Slot writes that depend on the booking count (capacity changes, deletion)
first rewrite the counter from the ledger with a single UPDATE, which also
takes the write lock, and then validate against the fresh values.
"""

import logging
from datetime import time
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from camp_scheduling.constants.scheduling import PatternType, SlotStatus
from camp_scheduling.core.exceptions import (
    CapacityBelowBookingsError,
    InvalidPatternError,
    InvalidWindowError,
    NotFoundError,
    SchedulingError,
    SlotHasBookingsError,
)
from camp_scheduling.crud.base import CRUDBase
from camp_scheduling.crud.crud_camp import camp as crud_camp
from camp_scheduling.models.availability_slot import AvailabilitySlot
from camp_scheduling.schemas.slot import (
    AvailabilitySlotCreate,
    AvailabilitySlotUpdate,
    RecurringSlotCreate,
)
from camp_scheduling.services import slot_reconciler
from camp_scheduling.utils.calendar_utils import add_minutes, duration_minutes
from camp_scheduling.utils.recurrence import expand_dates

logger = logging.getLogger(__name__)


def _window_minutes(start_time: time, end_time: time) -> int:
    minutes = duration_minutes(start_time, end_time)
    if minutes <= 0:
        raise InvalidWindowError(start_time, end_time)
    return minutes


class CRUDAvailabilitySlot(CRUDBase[AvailabilitySlot, AvailabilitySlotCreate, AvailabilitySlotUpdate]):

    def get_for_camp(self, db: Session, *, camp_id: str, slot_id: str) -> AvailabilitySlot:
        """Get a slot of a camp, reconciled, or raise NotFound."""
        slot = (
            db.query(self.model)
            .filter(self.model.id == slot_id, self.model.camp_id == camp_id)
            .first()
        )
        if not slot:
            raise NotFoundError("Availability slot", slot_id)
        return slot_reconciler.reconcile(db, slot)

    def list_by_camp(self, db: Session, *, camp_id: str) -> List[AvailabilitySlot]:
        """All slots of a camp by (date, start time), each reconciled."""
        crud_camp.get_or_404(db, camp_id)
        slots = (
            db.query(self.model)
            .filter(self.model.camp_id == camp_id)
            .order_by(self.model.slot_date.asc(), self.model.start_time.asc())
            .all()
        )
        return slot_reconciler.reconcile_many(db, slots)

    def create_with_camp(
        self,
        db: Session,
        *,
        obj_in: AvailabilitySlotCreate,
        camp_id: str,
        creator_id: str,
    ) -> AvailabilitySlot:
        crud_camp.get_or_404(db, camp_id)
        minutes = _window_minutes(obj_in.start_time, obj_in.end_time)

        slot = self.model(
            **obj_in.model_dump(),
            camp_id=camp_id,
            creator_id=creator_id,
            duration_minutes=minutes,
            current_bookings=0,
            status=SlotStatus.AVAILABLE,
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        logger.info(f"Created slot {slot.id} for camp {camp_id} on {slot.slot_date}")
        return slot

    def create_recurring(
        self,
        db: Session,
        *,
        obj_in: RecurringSlotCreate,
        camp_id: str,
        creator_id: str,
    ) -> List[AvailabilitySlot]:
        """
        Create a chain of slots, one per occurrence of the recurrence rule.

        Every slot keeps the first slot's start time and duration. Each one
        points at the slot before it through parent_slot_id. The chain is
        written in one transaction.
        """
        crud_camp.get_or_404(db, camp_id)
        minutes = _window_minutes(obj_in.start_time, obj_in.end_time)
        end_time = add_minutes(obj_in.start_time, minutes)

        dates = expand_dates(
            obj_in.slot_date,
            obj_in.recurrence_end_date,
            PatternType.ALL_DAYS,
            obj_in.recurrence_rule,
        )
        if not dates:
            raise InvalidPatternError("recurrence_end_date must not be before slot_date")

        fields = obj_in.model_dump(
            exclude={"slot_date", "start_time", "end_time", "recurrence_rule", "recurrence_end_date"}
        )
        slots: List[AvailabilitySlot] = []
        try:
            parent: Optional[AvailabilitySlot] = None
            for slot_date in dates:
                slot = self.model(
                    **fields,
                    camp_id=camp_id,
                    creator_id=creator_id,
                    slot_date=slot_date,
                    start_time=obj_in.start_time,
                    end_time=end_time,
                    duration_minutes=minutes,
                    current_bookings=0,
                    status=SlotStatus.AVAILABLE,
                    is_recurring=True,
                    recurrence_rule=obj_in.recurrence_rule,
                    recurrence_end_date=obj_in.recurrence_end_date,
                    parent_slot_id=parent.id if parent else None,
                )
                db.add(slot)
                # Assigns the id the next slot links to
                db.flush()
                slots.append(slot)
                parent = slot
            db.commit()
        except SQLAlchemyError:
            logger.error(f"Failed to create recurring slots for camp {camp_id}", exc_info=True)
            db.rollback()
            raise

        for slot in slots:
            db.refresh(slot)
        logger.info(
            f"Created {len(slots)} recurring slots for camp {camp_id} "
            f"({obj_in.recurrence_rule} until {obj_in.recurrence_end_date})"
        )
        return slots

    def _lock_and_recount(self, db: Session, slot_id: str) -> AvailabilitySlot:
        db.execute(slot_reconciler.recount_statement([slot_id]))
        slot = db.query(self.model).filter(self.model.id == slot_id).first()
        if not slot:
            raise NotFoundError("Availability slot", slot_id)
        db.refresh(slot)
        return slot

    def update_slot(
        self,
        db: Session,
        *,
        slot_id: str,
        obj_in: AvailabilitySlotUpdate,
    ) -> AvailabilitySlot:
        """
        Patch time window, capacity, notes or buffers of a slot.

        Status is never patched directly; it is recomputed from the booking
        count against the (possibly new) capacity.
        """
        update_data = obj_in.model_dump(exclude_unset=True)
        # Only notes may be cleared; a null for any other field means "unchanged"
        update_data = {
            field: value
            for field, value in update_data.items()
            if value is not None or field == "notes"
        }

        try:
            slot = self._lock_and_recount(db, slot_id)

            start_time = update_data.get("start_time", slot.start_time)
            end_time = update_data.get("end_time", slot.end_time)
            minutes = _window_minutes(start_time, end_time)

            new_capacity = update_data.get("max_bookings", slot.max_bookings)
            if new_capacity < slot.current_bookings:
                raise CapacityBelowBookingsError(slot_id, new_capacity, slot.current_bookings)

            for field, value in update_data.items():
                setattr(slot, field, value)
            slot.duration_minutes = minutes
            slot.status = SlotStatus.for_count(slot.current_bookings, slot.max_bookings)

            db.commit()
        except SchedulingError:
            db.rollback()
            raise
        except SQLAlchemyError:
            logger.error(f"Failed to update slot {slot_id}", exc_info=True)
            db.rollback()
            raise

        db.refresh(slot)
        return slot

    def delete_slot(self, db: Session, *, slot_id: str) -> None:
        """Delete a slot that holds no confirmed bookings."""
        try:
            slot = self._lock_and_recount(db, slot_id)
            if slot.current_bookings > 0:
                raise SlotHasBookingsError(slot_id, slot.current_bookings)
            db.delete(slot)
            db.commit()
        except SchedulingError:
            db.rollback()
            raise
        except SQLAlchemyError:
            logger.error(f"Failed to delete slot {slot_id}", exc_info=True)
            db.rollback()
            raise
        logger.info(f"Deleted slot {slot_id}")

    def lineage(self, db: Session, *, slot_id: str) -> List[AvailabilitySlot]:
        """Ancestors of a slot, nearest first, following parent_slot_id."""
        slot = self.get(db, slot_id)
        if not slot:
            raise NotFoundError("Availability slot", slot_id)
        ancestors = []
        while slot.parent_slot_id:
            slot = self.get(db, slot.parent_slot_id)
            if slot is None:
                break
            ancestors.append(slot)
        return ancestors


availability_slot = CRUDAvailabilitySlot(AvailabilitySlot)
