"""
Kids check-in service.

A check-in points at exactly one child, either a member's child or a
visiting child. Check-out updates the same row.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vine_portal.core.errors import DataStoreError, NotFound, ValidationFailed
from vine_portal.models.check_in import CheckIn, CheckInStatus
from vine_portal.models.member import Child
from vine_portal.models.visitor import VisitorChild
from vine_portal.schemas.check_in import CheckInChildOut, CheckInCreate, CheckInOut, CheckOutRequest


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _child_summary(db: Session, check_in: CheckIn) -> Optional[CheckInChildOut]:
    if check_in.member_child_id is not None:
        child = db.get(Child, check_in.member_child_id)
        kind = "member"
    elif check_in.visitor_child_id is not None:
        child = db.get(VisitorChild, check_in.visitor_child_id)
        kind = "visitor"
    else:
        return None
    if child is None:
        return None
    return CheckInChildOut(
        kind=kind,
        id=child.id,
        name=child.name,
        date_of_birth=child.date_of_birth,
        allergies=child.allergies,
        special_needs=child.special_needs,
        photo_permission=child.photo_permission,
    )


def to_out(db: Session, check_in: CheckIn) -> CheckInOut:
    out = CheckInOut.model_validate(check_in)
    out.child = _child_summary(db, check_in)
    return out


def parse_status_filter(status: Optional[str]) -> Optional[CheckInStatus]:
    if not status:
        return None
    try:
        return CheckInStatus(status)
    except ValueError:
        raise ValidationFailed(
            "Invalid status. Must be \"checked_in\" or \"checked_out\"",
            details={"receivedStatus": status},
            code="INVALID_STATUS",
        )


def validate_child_reference(payload: CheckInCreate) -> None:
    if (payload.member_child_id is None) == (payload.visitor_child_id is None):
        raise ValidationFailed(
            "Exactly one of member_child_id or visitor_child_id must be provided",
            code="INVALID_CHILD_REFERENCE",
        )


def list_check_ins(
    db: Session,
    status: Optional[CheckInStatus] = None,
    service_date: Optional[date] = None,
) -> list[CheckIn]:
    query = db.query(CheckIn).filter(CheckIn.service_date == (service_date or _today()))
    if status is not None:
        query = query.filter(CheckIn.status == status)
    try:
        return query.order_by(CheckIn.checked_in_at.desc(), CheckIn.id.desc()).all()
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch check-ins", exc) from exc


def create_check_in(db: Session, payload: CheckInCreate, checked_in_by: str) -> CheckIn:
    """`payload` must have passed validate_child_reference."""
    if payload.member_child_id is not None and db.get(Child, payload.member_child_id) is None:
        raise NotFound("Child", payload.member_child_id)
    if payload.visitor_child_id is not None and db.get(VisitorChild, payload.visitor_child_id) is None:
        raise NotFound("Visitor child", payload.visitor_child_id)

    check_in = CheckIn(
        service_date=payload.service_date,
        service_time=payload.service_time,
        member_child_id=payload.member_child_id,
        visitor_child_id=payload.visitor_child_id,
        checked_in_by=checked_in_by,
        checked_in_by_name=payload.checked_in_by_name,
        checkin_notes=payload.checkin_notes or None,
        status=CheckInStatus.checked_in,
    )
    try:
        db.add(check_in)
        db.commit()
        db.refresh(check_in)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to create check-in", exc) from exc
    return check_in


def check_out(db: Session, payload: CheckOutRequest, checked_out_by: str) -> CheckIn:
    check_in = db.get(CheckIn, payload.id)
    if check_in is None:
        raise NotFound("Check-in", payload.id)
    check_in.checked_out_at = datetime.now(tz=timezone.utc)
    check_in.checked_out_by = checked_out_by
    check_in.checked_out_by_name = payload.checked_out_by_name
    check_in.checkout_notes = payload.checkout_notes or None
    check_in.status = CheckInStatus.checked_out
    try:
        db.commit()
        db.refresh(check_in)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to update check-in", exc) from exc
    return check_in
