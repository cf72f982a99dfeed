from datetime import date

from app.core.exceptions import StorageError
from app.models.pto_balance import PtoBalance
from app.models.staff_leave import StaffLeave
from app.services.pto_balance_service import BalanceSynchronizer


def _leave_payload(instructor_id, **overrides):
    payload = {
        "instructor_id": instructor_id,
        "leave_type": "PTO",
        "start_date": "2025-03-01",
        "end_date": "2025-03-05",
        "return_date": "2025-03-06",
        "pto_days": 5,
        "rr_days": 0,
        "status": "Approved",
        "destination": "Lisbon",
    }
    payload.update(overrides)
    return payload


def _balance(db_session, instructor_id, year):
    db_session.expire_all()
    return db_session.query(PtoBalance).filter_by(instructor_id=instructor_id, year=year).first()


def test_create_approved_pto_syncs_balance(client, db_session, make_instructor):
    instructor = make_instructor()
    response = client.post("/api/staff-leave", json=_leave_payload(instructor.id))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "Approved"
    assert body["destination"] == "Lisbon"

    balance = _balance(db_session, instructor.id, 2025)
    assert balance.used_days == 5
    assert balance.remaining_days == 16


def test_create_pending_leave_does_not_create_balance(client, db_session, make_instructor):
    instructor = make_instructor()
    response = client.post("/api/staff-leave", json=_leave_payload(instructor.id, status="Pending"))

    assert response.status_code == 201
    assert _balance(db_session, instructor.id, 2025) is None


def test_create_for_unknown_instructor_returns_404(client):
    response = client.post("/api/staff-leave", json=_leave_payload(12345))
    assert response.status_code == 404
    assert response.json()["errors"][0]["code"] == "NOT_FOUND"


def test_create_rejects_negative_days(client, make_instructor):
    instructor = make_instructor()
    response = client.post("/api/staff-leave", json=_leave_payload(instructor.id, pto_days=-2))
    assert response.status_code == 422
    assert response.json()["success"] is False


def test_create_rejects_inverted_dates(client, make_instructor):
    instructor = make_instructor()
    response = client.post(
        "/api/staff-leave",
        json=_leave_payload(instructor.id, start_date="2025-03-10", end_date="2025-03-01"),
    )
    assert response.status_code == 422


def test_approve_endpoint_syncs_balance(client, db_session, make_instructor, make_leave):
    instructor = make_instructor()
    leave = make_leave(instructor, date(2025, 4, 1), status="Pending", pto_days=4)

    response = client.patch(f"/api/staff-leave/{leave.id}/approve")

    assert response.status_code == 200
    assert response.json()["status"] == "Approved"
    assert _balance(db_session, instructor.id, 2025).used_days == 4


def test_reject_endpoint_releases_days(client, db_session, make_instructor, make_leave):
    instructor = make_instructor()
    leave = make_leave(instructor, date(2025, 4, 1), pto_days=4)
    client.post(f"/api/pto-balance/{instructor.id}/2025/sync")

    response = client.patch(f"/api/staff-leave/{leave.id}/reject")

    assert response.status_code == 200
    balance = _balance(db_session, instructor.id, 2025)
    assert balance.used_days == 0
    assert balance.remaining_days == 21


def test_update_day_count_resyncs(client, db_session, make_instructor):
    instructor = make_instructor()
    leave_id = client.post("/api/staff-leave", json=_leave_payload(instructor.id)).json()["id"]

    response = client.patch(f"/api/staff-leave/{leave_id}", json={"pto_days": 9})

    assert response.status_code == 200
    assert _balance(db_session, instructor.id, 2025).used_days == 9


def test_moving_leave_across_years_resyncs_both(client, db_session, make_instructor):
    instructor = make_instructor()
    leave_id = client.post(
        "/api/staff-leave",
        json=_leave_payload(instructor.id, start_date="2024-12-28", end_date="2025-01-02", pto_days=4),
    ).json()["id"]
    assert _balance(db_session, instructor.id, 2024).used_days == 4

    response = client.patch(
        f"/api/staff-leave/{leave_id}",
        json={"start_date": "2025-01-03", "end_date": "2025-01-07"},
    )

    assert response.status_code == 200
    assert _balance(db_session, instructor.id, 2024).used_days == 0
    assert _balance(db_session, instructor.id, 2025).used_days == 4


def test_update_cannot_clear_required_fields(client, make_instructor):
    instructor = make_instructor()
    leave_id = client.post("/api/staff-leave", json=_leave_payload(instructor.id)).json()["id"]

    response = client.patch(f"/api/staff-leave/{leave_id}", json={"status": None})

    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INVALID_INPUT"


def test_update_rejects_end_before_start(client, make_instructor):
    instructor = make_instructor()
    leave_id = client.post("/api/staff-leave", json=_leave_payload(instructor.id)).json()["id"]

    response = client.patch(f"/api/staff-leave/{leave_id}", json={"end_date": "2025-02-01"})

    assert response.status_code == 400


def test_delete_approved_pto_resyncs(client, db_session, make_instructor):
    instructor = make_instructor()
    leave_id = client.post("/api/staff-leave", json=_leave_payload(instructor.id)).json()["id"]

    response = client.delete(f"/api/staff-leave/{leave_id}")

    assert response.status_code == 204
    assert db_session.get(StaffLeave, leave_id) is None
    assert _balance(db_session, instructor.id, 2025).used_days == 0


def test_get_and_list_leave(client, make_instructor, make_leave):
    instructor = make_instructor()
    other = make_instructor("John Roe")
    make_leave(instructor, date(2025, 1, 10), status="Pending", pto_days=1)
    approved = make_leave(instructor, date(2025, 2, 10), pto_days=2)
    make_leave(other, date(2025, 3, 10), pto_days=3)

    assert client.get(f"/api/staff-leave/{approved.id}").json()["pto_days"] == 2
    assert len(client.get("/api/staff-leave").json()) == 3
    mine = client.get("/api/staff-leave", params={"instructor_id": instructor.id}).json()
    assert [r["start_date"] for r in mine] == ["2025-02-10", "2025-01-10"]
    pending = client.get("/api/staff-leave", params={"status": "pending"}).json()
    assert len(pending) == 1


def test_missing_leave_returns_404(client):
    assert client.get("/api/staff-leave/999").status_code == 404
    assert client.patch("/api/staff-leave/999", json={"pto_days": 1}).status_code == 404
    assert client.delete("/api/staff-leave/999").status_code == 404


def test_sync_failure_does_not_block_mutation(client, db_session, make_instructor, monkeypatch, caplog):
    instructor = make_instructor()

    def broken_sync(self, instructor_id, year):
        raise StorageError("balance table unavailable")

    monkeypatch.setattr(BalanceSynchronizer, "synchronize", broken_sync)

    response = client.post("/api/staff-leave", json=_leave_payload(instructor.id))

    assert response.status_code == 201
    db_session.expire_all()
    assert db_session.get(StaffLeave, response.json()["id"]) is not None
    assert _balance(db_session, instructor.id, 2025) is None
    assert "Best-effort PTO sync failed" in caplog.text
