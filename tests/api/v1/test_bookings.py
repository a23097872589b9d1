# tests/api/v1/test_bookings.py

from fastapi.testclient import TestClient

from camp_scheduling.crud import crud_slot_booking
from camp_scheduling.utils.kafka_helpers import (
    SLOT_BOOKED,
    SLOT_BOOKING_CANCELLED,
    SLOT_BOOKING_RESCHEDULED,
)
from tests.utils.factories import create_test_camp, create_test_slot


def _book_url(camp_id, slot_id):
    return f"/api/v1/camps/{camp_id}/availability-slots/{slot_id}/book"


def test_book_slot_success(db_session, test_client: TestClient, published_events):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)

    response = test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_1"})

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "confirmed"
    assert data["parent_id"] == "parent_123"
    published_events.assert_called_once()
    assert published_events.call_args[0][0] == SLOT_BOOKED
    assert published_events.call_args[1]["slot_id"] == slot.id

    fetched = test_client.get(f"/api/v1/camps/{camp.id}/availability-slots/{slot.id}")
    assert fetched.json()["status"] == "booked"


def test_book_full_slot(db_session, test_client: TestClient, published_events):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)
    test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_1"})

    response = test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_2"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "FULL"
    assert published_events.call_count == 1


def test_book_duplicate(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id, max_bookings=2)
    test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_1"})

    response = test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_1"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "DUPLICATE_BOOKING"


def test_book_slot_of_another_camp(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    other = create_test_camp(db_session)
    slot = create_test_slot(db_session, other.id)

    response = test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_1"})

    assert response.status_code == 404


def test_cancel_own_booking(db_session, test_client: TestClient, published_events):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)
    booking_id = test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_1"}).json()["id"]

    response = test_client.post(
        f"/api/v1/slot-bookings/{booking_id}/cancel", json={"cancel_reason": "Sick"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert published_events.call_args[0][0] == SLOT_BOOKING_CANCELLED

    again = test_client.post(f"/api/v1/slot-bookings/{booking_id}/cancel", json={})
    assert again.status_code == 400
    assert again.json()["error_code"] == "ALREADY_CANCELLED"


def test_cancel_someone_elses_booking_is_forbidden(db_session, test_client: TestClient, current_user):
    camp = create_test_camp(db_session, org_id="org_xyz")
    slot = create_test_slot(db_session, camp.id)
    booking = crud_slot_booking.slot_booking.book(
        db_session, slot_id=slot.id, child_id="child_9", parent_id="parent_other"
    )

    response = test_client.post(f"/api/v1/slot-bookings/{booking.id}/cancel", json={})

    assert response.status_code == 403


def test_camp_staff_can_cancel_a_parents_booking(db_session, test_client: TestClient):
    camp = create_test_camp(db_session, org_id="org_abc")
    slot = create_test_slot(db_session, camp.id)
    booking = crud_slot_booking.slot_booking.book(
        db_session, slot_id=slot.id, child_id="child_9", parent_id="parent_other"
    )

    response = test_client.post(f"/api/v1/slot-bookings/{booking.id}/cancel", json={})

    assert response.status_code == 200


def test_cancel_missing_booking(test_client: TestClient):
    response = test_client.post("/api/v1/slot-bookings/bkg_missing/cancel", json={})

    assert response.status_code == 404


def test_reschedule_booking(db_session, test_client: TestClient, published_events):
    camp = create_test_camp(db_session)
    first = create_test_slot(db_session, camp.id)
    second = create_test_slot(db_session, camp.id)
    booking_id = test_client.post(_book_url(camp.id, first.id), json={"child_id": "child_1"}).json()["id"]

    response = test_client.post(
        f"/api/v1/slot-bookings/{booking_id}/reschedule", json={"new_slot_id": second.id}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slot_id"] == second.id
    assert data["rescheduled_from_id"] == booking_id
    assert published_events.call_args[0][0] == SLOT_BOOKING_RESCHEDULED

    lineage = test_client.get(f"/api/v1/slot-bookings/{data['id']}/lineage")
    assert [b["id"] for b in lineage.json()] == [booking_id]


def test_parent_and_camp_booking_lists(db_session, test_client: TestClient, current_user):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id, max_bookings=3)
    test_client.post(_book_url(camp.id, slot.id), json={"child_id": "child_1"})
    crud_slot_booking.slot_booking.book(
        db_session, slot_id=slot.id, child_id="child_2", parent_id="parent_other"
    )

    mine = test_client.get("/api/v1/parent/bookings")
    everyone = test_client.get(f"/api/v1/camps/{camp.id}/bookings")
    confirmed = test_client.get(
        f"/api/v1/camps/{camp.id}/availability-slots/{slot.id}/bookings", params={"status": "confirmed"}
    )

    assert [b["child_id"] for b in mine.json()] == ["child_1"]
    assert len(everyone.json()) == 2
    assert len(confirmed.json()) == 2

    current_user.org_id = "org_xyz"
    assert test_client.get(f"/api/v1/camps/{camp.id}/bookings").status_code == 403
