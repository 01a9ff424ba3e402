from __future__ import annotations

from datetime import date

import pytest

from src.mess_system.mess_system.main import create_app


@pytest.fixture
def app():
    return create_app("config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, username="admin", password="admin"):
    return client.post("/api/login", json={"username": username, "password": password})


def test_login_rejects_bad_credentials(client):
    res = _login(client, password="wrong")

    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Invalid username or password."}


def test_endpoints_require_login(client):
    assert client.get("/api/me").status_code == 401
    assert client.get("/api/users").status_code == 401


def test_admin_flow_add_student_mark_and_bill(client):
    assert _login(client).status_code == 200
    me = client.get("/api/me").get_json()["user"]
    assert me["is_super_admin"] is True
    assert "password_hash" not in me

    res = client.post("/api/users", json={"role": "student", "name": "sam", "password": "pass1"})
    assert res.status_code == 201
    student_id = res.get_json()["user"]["user_id"]

    today = date.today().isoformat()
    res = client.post("/api/admin/attendance/toggle", json={"user_id": student_id, "date": today, "meal": "Dinner"})
    assert res.status_code == 200
    assert res.get_json()["result"]["marked"] is True

    res = client.post("/api/ledger/payments", json={"user_id": student_id, "amount": "30"})
    assert res.status_code == 201

    statement = client.get(f"/api/users/{student_id}/ledger").get_json()
    assert statement["balance"] == "50"
    assert [row["balance_after"] for row in statement["history"]] == ["80", "50"]


def test_validation_and_not_found_are_mapped(client):
    _login(client)

    res = client.post("/api/ledger/payments", json={"user_id": "ghost", "amount": "30"})
    assert res.status_code == 404

    res = client.post("/api/cash", json={"type": "adjustment", "amount": 10})
    assert res.status_code == 400

    res = client.post("/api/ledger/misc", json={"description": "Gas", "amount": 100, "date": "2025-03-20", "scope": "Both"})
    assert res.status_code == 400
    assert "No billable users" in res.get_json()["message"]


def test_student_cannot_use_admin_endpoints(client):
    _login(client)
    client.post("/api/users", json={"role": "student", "name": "sam", "password": "pass1"})
    client.post("/api/logout")

    assert _login(client, "sam", "pass1").status_code == 200
    assert client.get("/api/users").status_code == 403
    assert client.get("/api/bills/me").status_code == 200


def test_registration_round_trip(client):
    res = client.post(
        "/api/registrations",
        json={
            "name": "Alice",
            "age": 30,
            "profession": "Warden",
            "contact_number": "0300",
            "username": "alice",
            "password": "alicepw",
        },
    )
    assert res.status_code == 201
    request_id = res.get_json()["request"]["request_id"]
    assert "password_hash" not in res.get_json()["request"]

    _login(client)
    pending = client.get("/api/registrations").get_json()["requests"]
    assert [r["request_id"] for r in pending] == [request_id]

    res = client.post(f"/api/registrations/{request_id}/approve")
    assert res.status_code == 200
    assert res.get_json()["tenant"]["name"] == "Alice's Mess"

    assert client.post(f"/api/registrations/{request_id}/approve").status_code == 409

    client.post("/api/logout")
    _login(client, "alice", "alicepw")
    assert client.get("/api/tenant").get_json()["tenant"]["name"] == "Alice's Mess"
    assert client.get("/api/registrations").status_code == 403


def test_cook_records_returned_cash_only(client):
    _login(client)
    client.post("/api/users", json={"role": "cook", "name": "cookie", "password": "pass1"})
    client.post("/api/cash", json={"type": "given", "amount": "2000"})
    client.post("/api/logout")

    assert _login(client, "cookie", "pass1").status_code == 200
    res = client.post("/api/cash", json={"type": "returned", "amount": "500"})
    assert res.status_code == 201
    assert res.get_json()["transaction"]["type"] == "returned"

    assert client.post("/api/cash", json={"type": "given", "amount": "100"}).status_code == 403

    drawer = client.get("/api/cash").get_json()
    assert drawer["totals"]["given"] == "2000"
    assert drawer["totals"]["returned"] == "500"
    assert len(drawer["transactions"]) == 2


def test_student_sees_own_attendance_newest_first(client):
    _login(client)
    student_id = client.post("/api/users", json={"role": "student", "name": "sam", "password": "pass1"}).get_json()[
        "user"
    ]["user_id"]
    for day in ["2025-03-18", "2025-03-19"]:
        client.post("/api/admin/attendance/toggle", json={"user_id": student_id, "date": day, "meal": "Dinner"})
    client.post("/api/logout")

    _login(client, "sam", "pass1")
    res = client.get("/api/attendance/me")

    assert res.status_code == 200
    body = res.get_json()
    assert body["count"] == 2
    assert [m["date"] for m in body["marks"]] == ["2025-03-19", "2025-03-18"]
    assert client.get("/api/cash").status_code == 403
