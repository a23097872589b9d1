# tests/crud/test_availability_slot.py

from datetime import date, time

import pytest

from camp_scheduling.constants.scheduling import BookingStatus, SlotStatus
from camp_scheduling.core.exceptions import (
    CapacityBelowBookingsError,
    InvalidPatternError,
    InvalidWindowError,
    NotFoundError,
    SlotHasBookingsError,
)
from camp_scheduling.crud import crud_availability_slot, crud_slot_booking
from camp_scheduling.schemas.slot import (
    AvailabilitySlotCreate,
    AvailabilitySlotUpdate,
    RecurringSlotCreate,
)
from tests.utils.factories import create_test_camp, create_test_slot

slots = crud_availability_slot.availability_slot


def test_create_slot_derives_duration_and_starts_available(db_session):
    camp = create_test_camp(db_session)
    slot_in = AvailabilitySlotCreate(
        slot_date=date(2024, 1, 1), start_time=time(9, 0), end_time=time(10, 30), max_bookings=4
    )

    slot = slots.create_with_camp(db_session, obj_in=slot_in, camp_id=camp.id, creator_id="staff_1")

    assert slot.id.startswith("slot_")
    assert slot.duration_minutes == 90
    assert slot.current_bookings == 0
    assert slot.status == SlotStatus.AVAILABLE
    assert slot.is_recurring is False


def test_create_slot_rejects_empty_window(db_session):
    camp = create_test_camp(db_session)
    slot_in = AvailabilitySlotCreate(
        slot_date=date(2024, 1, 1), start_time=time(10, 0), end_time=time(10, 0)
    )

    with pytest.raises(InvalidWindowError):
        slots.create_with_camp(db_session, obj_in=slot_in, camp_id=camp.id, creator_id="staff_1")


def test_create_slot_for_unknown_camp(db_session):
    slot_in = AvailabilitySlotCreate(
        slot_date=date(2024, 1, 1), start_time=time(9, 0), end_time=time(10, 0)
    )
    with pytest.raises(NotFoundError):
        slots.create_with_camp(db_session, obj_in=slot_in, camp_id="camp_missing", creator_id="staff_1")


def test_list_by_camp_orders_by_date_then_start(db_session):
    camp = create_test_camp(db_session)
    late = create_test_slot(db_session, camp.id, slot_date=date(2024, 1, 2), start_time=time(8, 0), end_time=time(9, 0))
    afternoon = create_test_slot(db_session, camp.id, start_time=time(14, 0), end_time=time(15, 0))
    morning = create_test_slot(db_session, camp.id, start_time=time(9, 0), end_time=time(10, 0))

    listed = slots.list_by_camp(db_session, camp_id=camp.id)

    assert [s.id for s in listed] == [morning.id, afternoon.id, late.id]


def test_get_for_camp_hides_other_camps_slots(db_session):
    camp = create_test_camp(db_session)
    other = create_test_camp(db_session, org_id="org_other")
    slot = create_test_slot(db_session, camp.id)

    with pytest.raises(NotFoundError):
        slots.get_for_camp(db_session, camp_id=other.id, slot_id=slot.id)


def test_recurring_weekly_slots_form_a_chain(db_session):
    camp = create_test_camp(db_session)
    slot_in = RecurringSlotCreate(
        slot_date=date(2024, 1, 1),
        start_time=time(9, 0),
        end_time=time(10, 0),
        max_bookings=2,
        recurrence_rule="weekly",
        recurrence_end_date=date(2024, 1, 22),
    )

    created = slots.create_recurring(db_session, obj_in=slot_in, camp_id=camp.id, creator_id="staff_1")

    assert [s.slot_date for s in created] == [
        date(2024, 1, 1),
        date(2024, 1, 8),
        date(2024, 1, 15),
        date(2024, 1, 22),
    ]
    assert created[0].parent_slot_id is None
    for previous, current in zip(created, created[1:]):
        assert current.parent_slot_id == previous.id
    assert all(s.is_recurring and s.recurrence_rule == "weekly" for s in created)
    assert all(s.max_bookings == 2 and s.duration_minutes == 60 for s in created)

    ancestors = slots.lineage(db_session, slot_id=created[-1].id)
    assert [s.id for s in ancestors] == [created[2].id, created[1].id, created[0].id]


def test_recurring_slots_reject_end_before_start(db_session):
    camp = create_test_camp(db_session)
    slot_in = RecurringSlotCreate(
        slot_date=date(2024, 1, 10),
        start_time=time(9, 0),
        end_time=time(10, 0),
        recurrence_rule="daily",
        recurrence_end_date=date(2024, 1, 1),
    )

    with pytest.raises(InvalidPatternError):
        slots.create_recurring(db_session, obj_in=slot_in, camp_id=camp.id, creator_id="staff_1")


def test_raising_capacity_reopens_a_booked_slot(db_session):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id, max_bookings=1)
    crud_slot_booking.slot_booking.book(db_session, slot_id=slot.id, child_id="c1", parent_id="p1")

    updated = slots.update_slot(db_session, slot_id=slot.id, obj_in=AvailabilitySlotUpdate(max_bookings=3))

    assert updated.max_bookings == 3
    assert updated.current_bookings == 1
    assert updated.status == SlotStatus.AVAILABLE


def test_capacity_cannot_drop_below_confirmed_bookings(db_session):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id, max_bookings=3)
    for n in range(2):
        crud_slot_booking.slot_booking.book(db_session, slot_id=slot.id, child_id=f"c{n}", parent_id="p1")

    with pytest.raises(CapacityBelowBookingsError):
        slots.update_slot(db_session, slot_id=slot.id, obj_in=AvailabilitySlotUpdate(max_bookings=1))

    db_session.refresh(slot)
    assert slot.max_bookings == 3


def test_lowering_capacity_to_booking_count_marks_booked(db_session):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id, max_bookings=3)
    crud_slot_booking.slot_booking.book(db_session, slot_id=slot.id, child_id="c1", parent_id="p1")

    updated = slots.update_slot(db_session, slot_id=slot.id, obj_in=AvailabilitySlotUpdate(max_bookings=1))

    assert updated.status == SlotStatus.BOOKED


def test_update_window_recomputes_duration(db_session):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)

    updated = slots.update_slot(
        db_session,
        slot_id=slot.id,
        obj_in=AvailabilitySlotUpdate(end_time=time(11, 0), notes="Bring water"),
    )

    assert updated.duration_minutes == 120
    assert updated.notes == "Bring water"

    with pytest.raises(InvalidWindowError):
        slots.update_slot(db_session, slot_id=slot.id, obj_in=AvailabilitySlotUpdate(start_time=time(12, 0)))


def test_delete_slot_with_bookings_is_rejected(db_session):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)
    crud_slot_booking.slot_booking.book(db_session, slot_id=slot.id, child_id="c1", parent_id="p1")

    with pytest.raises(SlotHasBookingsError):
        slots.delete_slot(db_session, slot_id=slot.id)

    assert slots.get(db_session, slot.id) is not None


def test_delete_slot_keeps_cancelled_history(db_session):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)
    slot_id = slot.id
    booking = crud_slot_booking.slot_booking.book(db_session, slot_id=slot_id, child_id="c1", parent_id="p1")
    crud_slot_booking.slot_booking.cancel(db_session, booking_id=booking.id)

    slots.delete_slot(db_session, slot_id=slot_id)

    assert slots.get(db_session, slot_id) is None
    history = crud_slot_booking.slot_booking.get(db_session, booking.id)
    db_session.refresh(history)
    assert history.status == BookingStatus.CANCELLED
    assert history.slot_id is None
