"""
Schedule router.

GET    /api/schedule-events: public, active events only
POST   /api/schedule-events: admin-panel
PUT    /api/schedule-events/{id}: admin-panel
DELETE /api/schedule-events/{id}: admin-panel
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Request, status

from vine_portal.core.errors import request_id_for
from vine_portal.db.base import elevated_session
from vine_portal.schemas.common import ERROR_RESPONSES, ErrorResponse, SuccessResponse
from vine_portal.schemas.schedule import ScheduleEventCreate, ScheduleEventOut, ScheduleEventUpdate
from vine_portal.services.gateway import AuthContext, require, validated_body
from vine_portal.services.permissions import Capability
from vine_portal.services.schedule import (
    create_event,
    delete_event,
    list_active_events,
    update_event,
    validate_event_changes,
    validate_new_event,
)

router = APIRouter(prefix="/api/schedule-events", tags=["schedule"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Schedule event absent."}}


@router.get(
    "",
    response_model=SuccessResponse[list[ScheduleEventOut]],
    summary="Active schedule events",
    responses={500: ERROR_RESPONSES[500]},
)
def list_events_endpoint(request: Request):
    """Ordered by event type, weekday (undated last) and display order."""
    with elevated_session() as db:
        data = [ScheduleEventOut.model_validate(e) for e in list_active_events(db)]
    return SuccessResponse[list[ScheduleEventOut]](data=data, requestId=request_id_for(request))


@router.post(
    "",
    response_model=SuccessResponse[ScheduleEventOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create a schedule event",
    responses=ERROR_RESPONSES,
)
def create_event_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.admin_panel)),
    payload: ScheduleEventCreate = Depends(validated_body(ScheduleEventCreate)),
):
    validate_new_event(payload)
    with elevated_session() as db:
        data = ScheduleEventOut.model_validate(create_event(db, payload))
    return SuccessResponse[ScheduleEventOut](data=data, requestId=request_id_for(request))


@router.put(
    "/{event_id}",
    response_model=SuccessResponse[ScheduleEventOut],
    summary="Update a schedule event",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def update_event_endpoint(
    request: Request,
    event_id: int = Path(ge=1),
    ctx: AuthContext = Depends(require(Capability.admin_panel)),
    payload: ScheduleEventUpdate = Depends(validated_body(ScheduleEventUpdate)),
):
    validate_event_changes(payload)
    with elevated_session() as db:
        data = ScheduleEventOut.model_validate(update_event(db, event_id, payload))
    return SuccessResponse[ScheduleEventOut](data=data, requestId=request_id_for(request))


@router.delete(
    "/{event_id}",
    response_model=SuccessResponse[dict],
    summary="Delete a schedule event",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def delete_event_endpoint(
    request: Request,
    event_id: int = Path(ge=1),
    ctx: AuthContext = Depends(require(Capability.admin_panel)),
):
    with elevated_session() as db:
        delete_event(db, event_id)
    return SuccessResponse[dict](data={"id": event_id, "deleted": True}, requestId=request_id_for(request))
