# tests/api/v1/test_availability_slots.py

from fastapi.testclient import TestClient

from camp_scheduling.crud import crud_slot_booking
from tests.utils.factories import create_test_camp, create_test_slot

SLOT_BODY = {
    "slot_date": "2024-01-01",
    "start_time": "09:00",
    "end_time": "10:30",
    "max_bookings": 2,
}


def test_create_slot_success(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)

    response = test_client.post(f"/api/v1/camps/{camp.id}/availability-slots", json=SLOT_BODY)

    assert response.status_code == 201
    data = response.json()
    assert data["duration_minutes"] == 90
    assert data["status"] == "available"
    assert data["current_bookings"] == 0
    assert data["creator_id"] == "parent_123"


def test_create_slot_forbidden_for_other_org(db_session, test_client: TestClient):
    camp = create_test_camp(db_session, org_id="org_xyz")

    response = test_client.post(f"/api/v1/camps/{camp.id}/availability-slots", json=SLOT_BODY)

    assert response.status_code == 403


def test_create_slot_unknown_camp(test_client: TestClient):
    response = test_client.post("/api/v1/camps/camp_missing/availability-slots", json=SLOT_BODY)

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


def test_create_slot_invalid_window(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    body = {**SLOT_BODY, "end_time": "08:00"}

    response = test_client.post(f"/api/v1/camps/{camp.id}/availability-slots", json=body)

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_WINDOW"


def test_create_slot_rejects_zero_capacity(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    body = {**SLOT_BODY, "max_bookings": 0}

    response = test_client.post(f"/api/v1/camps/{camp.id}/availability-slots", json=body)

    assert response.status_code == 422


def test_create_recurring_slots(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    body = {**SLOT_BODY, "recurrence_rule": "biweekly", "recurrence_end_date": "2024-01-31"}

    response = test_client.post(f"/api/v1/camps/{camp.id}/availability-slots/recurring", json=body)

    assert response.status_code == 201
    assert [s["slot_date"] for s in response.json()] == ["2024-01-01", "2024-01-15", "2024-01-29"]


def test_list_and_get_slots(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)

    listed = test_client.get(f"/api/v1/camps/{camp.id}/availability-slots")
    fetched = test_client.get(f"/api/v1/camps/{camp.id}/availability-slots/{slot.id}")

    assert listed.status_code == 200
    assert [s["id"] for s in listed.json()] == [slot.id]
    assert fetched.status_code == 200
    assert fetched.json()["id"] == slot.id


def test_get_missing_slot(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)

    response = test_client.get(f"/api/v1/camps/{camp.id}/availability-slots/slot_missing")

    assert response.status_code == 404


def test_update_slot_capacity_below_bookings(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id, max_bookings=2)
    for child in ("c1", "c2"):
        crud_slot_booking.slot_booking.book(db_session, slot_id=slot.id, child_id=child, parent_id="p1")

    response = test_client.patch(
        f"/api/v1/camps/{camp.id}/availability-slots/{slot.id}", json={"max_bookings": 1}
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "CAPACITY_BELOW_BOOKINGS"


def test_delete_slot(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)

    response = test_client.delete(f"/api/v1/camps/{camp.id}/availability-slots/{slot.id}")

    assert response.status_code == 204


def test_delete_slot_with_bookings(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    slot = create_test_slot(db_session, camp.id)
    crud_slot_booking.slot_booking.book(db_session, slot_id=slot.id, child_id="c1", parent_id="p1")

    response = test_client.delete(f"/api/v1/camps/{camp.id}/availability-slots/{slot.id}")

    assert response.status_code == 400
    assert response.json()["error_code"] == "HAS_BOOKINGS"
