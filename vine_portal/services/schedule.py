"""
Schedule service: public listing and admin-panel maintenance of events.

Weekly recurring events need a weekday and a time; special events need
neither. The validate_* functions look at the request body only and run
before a session is opened; checks against the stored row run inside.
"""
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vine_portal.core.errors import DataStoreError, NotFound, ValidationFailed
from vine_portal.models.schedule_event import ScheduleEvent, ScheduleEventType
from vine_portal.schemas.schedule import ScheduleEventCreate, ScheduleEventUpdate

_NOT_NULL_FIELDS = frozenset(
    {"title_pt", "title_en", "event_type", "icon_name", "display_order", "is_active"}
)


def _check_event_type(event_type: str) -> ScheduleEventType:
    try:
        return ScheduleEventType(event_type)
    except ValueError:
        raise ValidationFailed(
            'Invalid event_type. Must be "weekly_recurring" or "special"',
            details={"receivedType": event_type},
            code="INVALID_EVENT_TYPE",
        )


def _check_weekly_fields(event_type: ScheduleEventType, day_of_week, time) -> None:
    if event_type != ScheduleEventType.weekly_recurring:
        return
    if day_of_week is None:
        raise ValidationFailed(
            "day_of_week is required for weekly recurring events",
            code="MISSING_DAY_OF_WEEK",
        )
    if not time:
        raise ValidationFailed(
            "time is required for weekly recurring events",
            code="MISSING_TIME",
        )


def validate_new_event(payload: ScheduleEventCreate) -> ScheduleEventType:
    event_type = _check_event_type(payload.event_type)
    _check_weekly_fields(event_type, payload.day_of_week, payload.time)
    return event_type


def validate_event_changes(payload: ScheduleEventUpdate) -> Optional[ScheduleEventType]:
    """Check the new event_type, if one was sent."""
    if payload.event_type is None:
        return None
    return _check_event_type(payload.event_type)


def list_active_events(db: Session) -> list[ScheduleEvent]:
    try:
        return (
            db.query(ScheduleEvent)
            .filter(ScheduleEvent.is_active.is_(True))
            .order_by(
                ScheduleEvent.event_type.asc(),
                ScheduleEvent.day_of_week.is_(None),
                ScheduleEvent.day_of_week.asc(),
                ScheduleEvent.display_order.asc(),
            )
            .all()
        )
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch schedule events", exc) from exc


def create_event(db: Session, payload: ScheduleEventCreate) -> ScheduleEvent:
    """`payload` must have passed validate_new_event."""
    values: dict[str, Any] = payload.model_dump()
    values["event_type"] = ScheduleEventType(payload.event_type)
    for optional in ("description_pt", "description_en", "frequency_pt", "frequency_en", "time"):
        values[optional] = values[optional] or None
    event = ScheduleEvent(**values)
    try:
        db.add(event)
        db.commit()
        db.refresh(event)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to create schedule event", exc) from exc
    return event


def update_event(db: Session, event_id: int, payload: ScheduleEventUpdate) -> ScheduleEvent:
    """`payload` must have passed validate_event_changes."""
    event = db.get(ScheduleEvent, event_id)
    if event is None:
        raise NotFound("Schedule event", event_id)

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("event_type") is not None:
        changes["event_type"] = ScheduleEventType(changes["event_type"])
    # weekday/time rule against the merged row
    event_type = ScheduleEventType(changes.get("event_type") or event.event_type)
    _check_weekly_fields(
        event_type,
        changes.get("day_of_week", event.day_of_week),
        changes.get("time", event.time),
    )

    for name, value in changes.items():
        if value is None and name in _NOT_NULL_FIELDS:
            continue
        setattr(event, name, value)
    try:
        db.commit()
        db.refresh(event)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to update schedule event", exc) from exc
    return event


def delete_event(db: Session, event_id: int) -> None:
    event = db.get(ScheduleEvent, event_id)
    if event is None:
        raise NotFound("Schedule event", event_id)
    try:
        db.delete(event)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to delete schedule event", exc) from exc
