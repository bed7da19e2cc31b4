"""
Kids check-in / check-out endpoints.
"""
from datetime import date, datetime, timezone

import pytest

from vine_portal.models.member import Child, MemberProfile

from conftest import auth, refuse_elevated_session


def _today():
    return datetime.now(tz=timezone.utc).date().isoformat()


@pytest.fixture()
def member_child(db):
    parent = MemberProfile(name="João Lima", email="joao@example.org")
    db.add(parent)
    db.commit()
    child = Child(name="Davi", date_of_birth=date(2017, 4, 2), parent1_id=parent.id, allergies="none")
    db.add(child)
    db.commit()
    return child.id


@pytest.fixture()
def visitor_child(client):
    r = client.post(
        "/api/visitor-children",
        json={
            "name": "Sofia",
            "date_of_birth": "2019-09-09",
            "parent_name": "Rita",
            "parent_phone": "6045559999",
        },
        headers=auth("teacher-token"),
    )
    return r.json()["data"]["id"]


def _check_in(client, **refs):
    payload = {
        "service_date": _today(),
        "service_time": "10:30",
        "checked_in_by_name": "Prof. Ana",
        **refs,
    }
    return client.post("/api/check-ins", json=payload, headers=auth("teacher-token"))


class TestCheckIn:
    def test_check_in_member_child(self, client, member_child):
        r = _check_in(client, member_child_id=member_child)
        assert r.status_code == 201
        data = r.json()["data"]
        assert data["status"] == "checked_in"
        assert data["checked_in_by"] == "uid-teacher"
        assert data["child"]["kind"] == "member"
        assert data["child"]["name"] == "Davi"

    def test_check_in_visitor_child(self, client, visitor_child):
        r = _check_in(client, visitor_child_id=visitor_child)
        assert r.status_code == 201
        assert r.json()["data"]["child"]["kind"] == "visitor"

    def test_exactly_one_child_reference(self, client, member_child, visitor_child):
        r = _check_in(client)
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "INVALID_CHILD_REFERENCE"

        r = _check_in(client, member_child_id=member_child, visitor_child_id=visitor_child)
        assert r.status_code == 400

    def test_child_reference_checked_before_session(self, client, monkeypatch):
        import vine_portal.routers.check_ins as check_ins_router

        refuse_elevated_session(monkeypatch, check_ins_router)
        r = _check_in(client)
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "INVALID_CHILD_REFERENCE"

        r = client.get("/api/check-ins?status=lost", headers=auth("teacher-token"))
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "INVALID_STATUS"

    def test_unknown_child(self, client):
        r = _check_in(client, member_child_id=987654)
        assert r.status_code == 404

    def test_check_out(self, client, member_child):
        check_in_id = _check_in(client, member_child_id=member_child).json()["data"]["id"]
        r = client.put(
            "/api/check-ins",
            json={"id": check_in_id, "checked_out_by_name": "Prof. Ana", "checkout_notes": "picked up by mom"},
            headers=auth("leader-token"),
        )
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["status"] == "checked_out"
        assert data["checked_out_by"] == "uid-leader"
        assert data["checked_out_at"] is not None

    def test_check_out_unknown(self, client):
        r = client.put(
            "/api/check-ins",
            json={"id": 987654, "checked_out_by_name": "Prof. Ana"},
            headers=auth("teacher-token"),
        )
        assert r.status_code == 404


class TestListCheckIns:
    def test_filters_by_status(self, client, member_child):
        _check_in(client, member_child_id=member_child)
        r = client.get("/api/check-ins", params={"status": "checked_in"}, headers=auth("teacher-token"))
        assert r.status_code == 200
        data = r.json()["data"]
        assert data
        assert all(row["status"] == "checked_in" for row in data)

    def test_invalid_status(self, client):
        r = client.get("/api/check-ins", params={"status": "asleep"}, headers=auth("teacher-token"))
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "INVALID_STATUS"

    def test_other_date_is_empty(self, client):
        r = client.get("/api/check-ins", params={"service_date": "1999-01-01"}, headers=auth("admin-token"))
        assert r.status_code == 200
        assert r.json()["data"] == []

    def test_member_and_trainee_denied(self, client):
        assert client.get("/api/check-ins", headers=auth("member-token")).status_code == 403
        assert client.get("/api/check-ins", headers=auth("trainee-token")).status_code == 403
