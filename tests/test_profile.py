"""
Member self-service: own profile, member children and spouse candidates.
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy import func

from vine_portal.models.member import Child, MemberProfile

from conftest import auth

PROFILE = {"name": "Marta Souza", "phone": "6045550101", "email": "marta@example.org"}


@pytest.fixture(autouse=True)
def clean_profiles(db):
    """Drop the profiles and children a test wrote."""
    last_profile = db.query(func.max(MemberProfile.id)).scalar() or 0
    last_child = db.query(func.max(Child.id)).scalar() or 0
    yield
    db.query(Child).filter(Child.id > last_child).delete()
    db.query(MemberProfile).filter(MemberProfile.id > last_profile).delete()
    db.commit()


def _create_profile(client, token, **fields):
    r = client.post("/api/member-profile", json={**PROFILE, **fields}, headers=auth(token))
    assert r.status_code == 201
    return r.json()["data"]["id"]


class TestMemberProfile:
    def test_no_profile_yet(self, client):
        r = client.get("/api/member-profile", headers=auth("member-token"))
        assert r.status_code == 200
        assert r.json()["data"] == {"profile": None, "role": "member"}

    def test_create_then_read(self, client):
        r = client.post(
            "/api/member-profile",
            json={**PROFILE, "gender": "female", "volunteer_areas": ["kids"], "life_group": ""},
            headers=auth("member-token"),
        )
        assert r.status_code == 201
        created = r.json()["data"]
        assert created["user_id"] == "uid-member"
        assert created["is_baptized"] is False
        assert created["volunteer_areas"] == ["kids"]
        assert created["life_group"] is None

        data = client.get("/api/member-profile", headers=auth("member-token")).json()["data"]
        assert data["profile"]["id"] == created["id"]
        assert data["role"] == "member"

    def test_second_create_conflicts(self, client):
        _create_profile(client, "member-token")
        r = client.post("/api/member-profile", json=PROFILE, headers=auth("member-token"))
        assert r.status_code == 409
        assert r.json()["error"]["type"] == "conflict"
        assert r.json()["error"]["code"] == "PROFILE_EXISTS"

    def test_required_fields(self, client):
        r = client.post(
            "/api/member-profile",
            json={"name": "Marta", "email": " "},
            headers=auth("member-token"),
        )
        assert r.status_code == 400
        assert set(r.json()["error"]["details"]["missingFields"]) == {"phone", "email"}

    def test_update_needs_existing_profile(self, client):
        r = client.put("/api/member-profile", json=PROFILE, headers=auth("leader-token"))
        assert r.status_code == 404

    def test_update_rewrites_every_field(self, client):
        _create_profile(client, "member-token", life_group="Centro", is_married=True)
        r = client.put(
            "/api/member-profile",
            json={**PROFILE, "is_baptized": True},
            headers=auth("member-token"),
        )
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["is_baptized"] is True
        assert data["is_married"] is False
        assert data["life_group"] is None

    def test_spouse_link_is_checked(self, client):
        own_id = _create_profile(client, "member-token")
        r = client.put(
            "/api/member-profile",
            json={**PROFILE, "spouse_id": own_id},
            headers=auth("member-token"),
        )
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "INVALID_SPOUSE"

        r = client.put(
            "/api/member-profile",
            json={**PROFILE, "spouse_id": 987654},
            headers=auth("member-token"),
        )
        assert r.status_code == 404

    def test_gateway_applies(self, client):
        assert client.get("/api/member-profile").status_code == 401
        assert client.get("/api/member-profile", headers=auth("orphan-token")).status_code == 403


class TestChildren:
    def test_parent_registers_child(self, client):
        parent_id = _create_profile(client, "member-token")
        r = client.post(
            "/api/children",
            json={"date_of_birth": "2018-05-01", "parent1_id": parent_id},
            headers=auth("member-token"),
        )
        assert r.status_code == 201
        child = r.json()["data"]
        assert child["photo_permission"] is True
        assert child["name"] is None
        assert child["parent2_id"] is None

    def test_listed_for_either_parent_oldest_first(self, client):
        mother = _create_profile(client, "member-token")
        father = _create_profile(client, "teacher-token", name="Paulo Souza")
        for dob in ("2019-03-03", "2016-01-01"):
            client.post(
                "/api/children",
                json={"date_of_birth": dob, "parent1_id": mother, "parent2_id": father},
                headers=auth("member-token"),
            )

        r = client.get(f"/api/children?parent_id={father}", headers=auth("teacher-token"))
        assert r.status_code == 200
        assert [c["date_of_birth"] for c in r.json()["data"]] == ["2016-01-01", "2019-03-03"]

    def test_other_members_are_refused(self, client):
        parent_id = _create_profile(client, "member-token")
        r = client.get(f"/api/children?parent_id={parent_id}", headers=auth("teacher-token"))
        assert r.status_code == 403
        assert r.json()["error"]["code"] == "NOT_PARENT"

        _create_profile(client, "teacher-token", name="Outro")
        r = client.post(
            "/api/children",
            json={"date_of_birth": "2018-05-01", "parent1_id": parent_id},
            headers=auth("teacher-token"),
        )
        assert r.status_code == 403

    @pytest.mark.parametrize("token", ["leader-token", "admin-token"])
    def test_manage_members_may_act_on_any_child(self, client, token):
        parent_id = _create_profile(client, "member-token")
        r = client.get(f"/api/children?parent_id={parent_id}", headers=auth(token))
        assert r.status_code == 200

    def test_required_fields(self, client):
        r = client.post("/api/children", json={"name": "Davi"}, headers=auth("member-token"))
        assert r.status_code == 400
        assert set(r.json()["error"]["details"]["missingFields"]) == {"date_of_birth", "parent1_id"}

    def test_parent_id_query_required(self, client):
        r = client.get("/api/children", headers=auth("member-token"))
        assert r.status_code == 400
        assert r.json()["error"]["type"] == "validation"

    def test_unknown_parent(self, client):
        r = client.post(
            "/api/children",
            json={"date_of_birth": "2018-05-01", "parent1_id": 987654},
            headers=auth("admin-token"),
        )
        assert r.status_code == 404

    def test_update_and_delete(self, client):
        parent_id = _create_profile(client, "member-token")
        child_id = client.post(
            "/api/children",
            json={"name": "Lia", "date_of_birth": "2018-05-01", "parent1_id": parent_id},
            headers=auth("member-token"),
        ).json()["data"]["id"]

        r = client.put(
            "/api/children",
            json={"id": child_id, "allergies": "peanuts", "photo_permission": False},
            headers=auth("member-token"),
        )
        assert r.status_code == 200
        assert r.json()["data"]["allergies"] == "peanuts"
        assert r.json()["data"]["name"] == "Lia"
        assert r.json()["data"]["photo_permission"] is False

        r = client.put("/api/children", json={"id": 987654}, headers=auth("member-token"))
        assert r.status_code == 404

        r = client.delete(f"/api/children?id={child_id}", headers=auth("member-token"))
        assert r.status_code == 200
        assert r.json()["data"] == {"id": child_id, "deleted": True}
        r = client.delete(f"/api/children?id={child_id}", headers=auth("member-token"))
        assert r.status_code == 404

    def test_registered_child_can_be_checked_in(self, client):
        parent_id = _create_profile(client, "member-token")
        child_id = client.post(
            "/api/children",
            json={"name": "Davi", "date_of_birth": "2017-04-02", "parent1_id": parent_id},
            headers=auth("member-token"),
        ).json()["data"]["id"]

        r = client.post(
            "/api/check-ins",
            json={
                "service_date": datetime.now(tz=timezone.utc).date().isoformat(),
                "service_time": "10:30",
                "checked_in_by_name": "Prof. Ana",
                "member_child_id": child_id,
            },
            headers=auth("teacher-token"),
        )
        assert r.status_code == 201
        assert r.json()["data"]["child"]["name"] == "Davi"


class TestAvailableSpouses:
    def test_needs_own_profile(self, client):
        r = client.get("/api/available-spouses", headers=auth("member-token"))
        assert r.status_code == 404

    def test_missing_gender_warning(self, client):
        _create_profile(client, "member-token")
        r = client.get("/api/available-spouses", headers=auth("member-token"))
        assert r.status_code == 200
        assert r.json()["data"] == {"candidates": [], "warning": "missing_gender"}

    def test_unlinked_profiles_of_other_gender(self, client, db):
        _create_profile(client, "member-token", gender="female")
        ana = MemberProfile(name="Ana Candidate", gender="male")
        db.add_all([
            MemberProfile(name="Zeca Candidate", gender="male"),
            ana,
            MemberProfile(name="Bia Candidate", gender="female"),
            MemberProfile(name="Nil Candidate"),
        ])
        db.commit()
        db.add(MemberProfile(name="Caio Candidate", gender="male", spouse_id=ana.id))
        db.commit()

        r = client.get("/api/available-spouses", headers=auth("member-token"))
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["warning"] is None
        names = [c["name"] for c in data["candidates"] if c["name"].endswith("Candidate")]
        assert names == ["Ana Candidate", "Zeca Candidate"]
        assert all(c["gender"] == "male" for c in data["candidates"])
