"""
Database wiring.

Two access paths share one schema:

get_db()            request-scoped session used for identity/role lookups
elevated_session()  service-role session for the actual reads/writes; opened
                    per request, only after the gateway authorized the caller
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from vine_portal.core.config import settings


class Base(DeclarativeBase):
    pass


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Created lazily: the service-role engine is not touched until the first
# authorized request needs it.
ElevatedSessionLocal: sessionmaker | None = None


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _elevated_factory() -> sessionmaker:
    global ElevatedSessionLocal
    if ElevatedSessionLocal is None:
        url = settings.service_database_url
        elevated_engine = create_engine(
            url, pool_pre_ping=True, connect_args=_connect_args(url)
        )
        ElevatedSessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=elevated_engine
        )
    return ElevatedSessionLocal


@contextmanager
def elevated_session() -> Iterator[Session]:
    """Open a service-role session for one request. Never used for authz."""
    db = _elevated_factory()()
    try:
        yield db
    finally:
        db.close()
