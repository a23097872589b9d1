# tests/api/v1/test_recurrence_patterns.py

from fastapi.testclient import TestClient

from tests.utils.factories import create_test_camp

PATTERN_BODY = {
    "name": "Mon/Wed afternoons",
    "pattern_type": "specific_days",
    "start_date": "2024-01-01",
    "end_date": "2024-01-14",
    "days_of_week": [1, 3],
    "start_time": "13:00",
    "end_time": "16:00",
}


def test_create_and_expand_pattern(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)

    created = test_client.post(f"/api/v1/camps/{camp.id}/recurrence-patterns", json=PATTERN_BODY)
    assert created.status_code == 201
    pattern_id = created.json()["id"]
    assert created.json()["repeat_type"] == "daily"

    expanded = test_client.post(f"/api/v1/recurrence-patterns/{pattern_id}/expand")
    assert expanded.status_code == 200
    assert [s["session_date"] for s in expanded.json()] == [
        "2024-01-01",
        "2024-01-03",
        "2024-01-08",
        "2024-01-10",
    ]

    rerun = test_client.post(f"/api/v1/recurrence-patterns/{pattern_id}/expand")
    assert rerun.json() == []

    listed = test_client.get(f"/api/v1/camps/{camp.id}/sessions")
    assert len(listed.json()) == 4


def test_invalid_pattern(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    body = {**PATTERN_BODY, "days_of_week": []}

    response = test_client.post(f"/api/v1/camps/{camp.id}/recurrence-patterns", json=body)

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_PATTERN"


def test_reschedule_and_cancel_session(db_session, test_client: TestClient):
    camp = create_test_camp(db_session)
    pattern_id = test_client.post(
        f"/api/v1/camps/{camp.id}/recurrence-patterns", json=PATTERN_BODY
    ).json()["id"]
    first, second = test_client.post(f"/api/v1/recurrence-patterns/{pattern_id}/expand").json()[:2]

    moved = test_client.post(
        f"/api/v1/camp-sessions/{first['id']}/reschedule",
        json={"rescheduled_date": "2024-01-02", "rescheduled_status": "tbd"},
    )
    cancelled = test_client.post(f"/api/v1/camp-sessions/{second['id']}/cancel", json={})

    assert moved.status_code == 200
    assert moved.json()["status"] == "rescheduled"
    assert moved.json()["rescheduled_status"] == "tbd"
    assert cancelled.json()["status"] == "cancelled"


def test_expand_forbidden_for_other_org(db_session, test_client: TestClient, current_user):
    camp = create_test_camp(db_session)
    pattern_id = test_client.post(
        f"/api/v1/camps/{camp.id}/recurrence-patterns", json=PATTERN_BODY
    ).json()["id"]
    current_user.org_id = "org_xyz"

    response = test_client.post(f"/api/v1/recurrence-patterns/{pattern_id}/expand")

    assert response.status_code == 403
