"""
Member directory and volunteer sign-ups.
"""
from __future__ import annotations

import re

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vine_portal.core.errors import DataStoreError, ValidationFailed
from vine_portal.models.member import MemberProfile
from vine_portal.models.volunteer import Volunteer
from vine_portal.schemas.people import VolunteerCreate

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MIN_PHONE_DIGITS = 10


def list_members(db: Session) -> list[MemberProfile]:
    try:
        return (
            db.query(MemberProfile)
            .order_by(MemberProfile.created_at.desc(), MemberProfile.id.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch members", exc) from exc


def validate_volunteer(payload: VolunteerCreate) -> VolunteerCreate:
    """Check phone and email; returns the payload with a blank email dropped."""
    digits = re.sub(r"\D", "", payload.phone)
    if len(digits) < _MIN_PHONE_DIGITS:
        raise ValidationFailed(
            f"Invalid phone number format - must have at least {_MIN_PHONE_DIGITS} digits",
            details={"field": "phone"},
            code="INVALID_PHONE",
        )
    email = (payload.email or "").strip() or None
    if email and not _EMAIL_RE.match(email):
        raise ValidationFailed(
            "Invalid email format",
            details={"field": "email"},
            code="INVALID_EMAIL",
        )
    return payload.model_copy(update={"email": email})


def create_volunteer(db: Session, payload: VolunteerCreate) -> Volunteer:
    """`payload` must have passed validate_volunteer."""
    volunteer = Volunteer(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        description=payload.description,
        areas=list(payload.areas),
    )
    try:
        db.add(volunteer)
        db.commit()
        db.refresh(volunteer)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to save volunteer registration", exc) from exc
    return volunteer


def list_volunteers(db: Session) -> list[Volunteer]:
    try:
        return db.query(Volunteer).order_by(Volunteer.created_at.desc(), Volunteer.id.desc()).all()
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch volunteers", exc) from exc
