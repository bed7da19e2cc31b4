"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests, and
a fake auth provider that maps fixed bearer tokens to identities.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_vine_portal.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import vine_portal.db.base as db_base
from vine_portal.core.result import Err, Ok
from vine_portal.db.base import Base, get_db
from vine_portal.main import app
from vine_portal.models.user import User, UserRole
from vine_portal.services.identity import Identity, get_auth_provider

SQLITE_URL = "sqlite:///./test_vine_portal.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# token → (identity id, role or None when the identity has no role row)
TOKENS = {
    "admin-token": ("uid-admin", UserRole.admin),
    "leader-token": ("uid-leader", UserRole.leader),
    "teacher-token": ("uid-teacher", UserRole.teacher),
    "member-token": ("uid-member", UserRole.member),
    "trainee-token": ("uid-trainee", UserRole.trainee),
    "orphan-token": ("uid-orphan", None),
    # role row written by hand with a value outside UserRole
    "stranger-token": ("uid-stranger", None),
}


class FakeAuthProvider:
    def __init__(self):
        self.calls = []

    def get_user(self, token):
        self.calls.append(token)
        if token not in TOKENS:
            return Err("invalid_token")
        identity_id, _ = TOKENS[token]
        return Ok(Identity(id=identity_id, email=f"{identity_id}@example.org"))


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def refuse_elevated_session(monkeypatch, router_module):
    """Fail the test if the route opens its elevated session."""
    def refuse():
        raise AssertionError("elevated session opened")

    monkeypatch.setattr(router_module, "elevated_session", refuse)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        for identity_id, role in TOKENS.values():
            if role is not None and db.get(User, identity_id) is None:
                db.add(User(id=identity_id, email=f"{identity_id}@example.org", role=role))
        db.commit()
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def auth_provider():
    return FakeAuthProvider()


@pytest.fixture()
def client(db, auth_provider, monkeypatch):
    monkeypatch.setattr(db_base, "ElevatedSessionLocal", TestingSessionLocal)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def anyio_backend():
    # the executor and its tests are built on asyncio
    return "asyncio"
