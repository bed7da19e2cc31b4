"""
Visitor registration (including the 207 partial-failure path) and the
visitor-children endpoints.
"""
import pytest
from sqlalchemy import event

from vine_portal.models.visitor import Visitor, VisitorChild

from conftest import auth

VISITOR = {
    "visit_date": "2026-10-18",
    "name": "Maria Souza",
    "phone": "6045551234",
    "how_found": "friend",
}


@pytest.fixture()
def failing_children_insert():
    def raiser(mapper, connection, target):
        raise RuntimeError("visitor_children insert rejected")

    event.listen(VisitorChild, "before_insert", raiser)
    yield
    event.remove(VisitorChild, "before_insert", raiser)


class TestRegisterVisitor:
    def test_register_without_children(self, client):
        r = client.post("/api/visitors", json=VISITOR)
        assert r.status_code == 201
        body = r.json()
        assert body["success"] is True
        assert body["data"]["visitor"]["id"] > 0
        assert body["data"]["children"] == []

    def test_register_is_public(self, client, auth_provider):
        r = client.post("/api/visitors", json=VISITOR)
        assert r.status_code == 201
        assert auth_provider.calls == []

    def test_register_with_children(self, client, db):
        payload = {
            **VISITOR,
            "how_found": "other",
            "how_found_details": "  saw the sign  ",
            "children": [
                {"name": "Lia", "date_of_birth": "2019-03-01", "allergies": "peanuts"},
                {"name": "Téo", "date_of_birth": "2021-07-12", "photo_permission": False},
            ],
        }
        r = client.post("/api/visitors", json=payload)
        assert r.status_code == 201
        data = r.json()["data"]
        assert data["visitor"]["how_found_details"] == "saw the sign"
        assert len(data["children"]) == 2
        visitor_id = data["visitor"]["id"]
        for child in data["children"]:
            assert child["visitor_id"] == visitor_id
            assert child["parent_name"] == "Maria Souza"
            assert child["parent_phone"] == "6045551234"
        assert data["children"][0]["photo_permission"] is True
        assert data["children"][1]["photo_permission"] is False
        assert db.query(VisitorChild).filter(VisitorChild.visitor_id == visitor_id).count() == 2

    def test_children_failure_is_207_and_keeps_visitor(self, client, db, failing_children_insert):
        payload = {**VISITOR, "name": "Partial Pereira", "children": [
            {"name": "Bia", "date_of_birth": "2020-01-01"},
        ]}
        r = client.post("/api/visitors", json=payload)
        assert r.status_code == 207
        body = r.json()
        assert body["success"] is False
        assert body["error"]["type"] == "partial_failure"
        assert body["error"]["code"] == "CHILDREN_INSERT_FAILED"
        details = body["error"]["details"]
        assert details["visitorSaved"] is True
        assert details["childrenFailed"] is True
        assert details["childrenCount"] == 1

        visitor = db.get(Visitor, details["visitorId"])
        assert visitor is not None
        assert visitor.name == "Partial Pereira"
        assert db.query(VisitorChild).filter(VisitorChild.visitor_id == visitor.id).count() == 0

    def test_missing_fields(self, client):
        r = client.post("/api/visitors", json={"visit_date": "2026-10-18", "phone": " "})
        assert r.status_code == 400
        missing = r.json()["error"]["details"]["missingFields"]
        assert set(missing) == {"name", "phone", "how_found"}

    def test_missing_child_name(self, client):
        payload = {**VISITOR, "children": [{"date_of_birth": "2020-01-01"}]}
        r = client.post("/api/visitors", json=payload)
        assert r.status_code == 400
        assert r.json()["error"]["details"]["missingFields"] == ["children.0.name"]


class TestListVisitors:
    def test_requires_manage_visitors(self, client):
        assert client.get("/api/visitors", headers=auth("teacher-token")).status_code == 403
        assert client.get("/api/visitors", headers=auth("trainee-token")).status_code == 403

    def test_leader_lists_newest_first(self, client):
        client.post("/api/visitors", json={**VISITOR, "visit_date": "2030-01-05", "name": "Future"})
        r = client.get("/api/visitors", headers=auth("leader-token"))
        assert r.status_code == 200
        data = r.json()["data"]
        assert data[0]["name"] == "Future"


class TestVisitorChildren:
    CHILD = {
        "name": "Nina",
        "date_of_birth": "2018-05-05",
        "parent_name": "Carla",
        "parent_phone": "7785550000",
    }

    def test_create_and_search(self, client):
        r = client.post("/api/visitor-children", json=self.CHILD, headers=auth("teacher-token"))
        assert r.status_code == 201
        child = r.json()["data"]
        assert child["photo_permission"] is False
        assert child["visitor_id"] is None

        r = client.get("/api/visitor-children", params={"search": "carla"}, headers=auth("teacher-token"))
        assert r.status_code == 200
        assert any(c["id"] == child["id"] for c in r.json()["data"])

        r = client.get("/api/visitor-children", params={"search": "zzz-no-match"}, headers=auth("teacher-token"))
        assert r.json()["data"] == []

    def test_update(self, client):
        created = client.post("/api/visitor-children", json=self.CHILD, headers=auth("leader-token")).json()["data"]
        r = client.put(
            "/api/visitor-children",
            json={"id": created["id"], "allergies": "gluten", "photo_permission": True},
            headers=auth("leader-token"),
        )
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["allergies"] == "gluten"
        assert data["photo_permission"] is True
        assert data["name"] == "Nina"

    def test_update_unknown_id(self, client):
        r = client.put("/api/visitor-children", json={"id": 999999}, headers=auth("admin-token"))
        assert r.status_code == 404
        assert r.json()["error"]["type"] == "not_found"

    def test_member_denied(self, client):
        r = client.post("/api/visitor-children", json=self.CHILD, headers=auth("member-token"))
        assert r.status_code == 403
