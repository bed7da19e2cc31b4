"""
Kids check-in router (kids-checkin capability).

GET  /api/check-ins: filter by status / service_date (defaults to today)
POST /api/check-ins: check a child in
PUT  /api/check-ins: check a child out
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from vine_portal.core.errors import request_id_for
from vine_portal.db.base import elevated_session
from vine_portal.schemas.check_in import CheckInCreate, CheckInOut, CheckOutRequest
from vine_portal.schemas.common import ERROR_RESPONSES, ErrorResponse, SuccessResponse
from vine_portal.services.check_ins import (
    check_out,
    create_check_in,
    list_check_ins,
    parse_status_filter,
    to_out,
    validate_child_reference,
)
from vine_portal.services.gateway import AuthContext, require, validated_body
from vine_portal.services.permissions import Capability

router = APIRouter(prefix="/api/check-ins", tags=["check-ins"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Referenced child or check-in absent."}}


@router.get(
    "",
    response_model=SuccessResponse[list[CheckInOut]],
    summary="Check-ins for a service date",
    responses=ERROR_RESPONSES,
)
def list_check_ins_endpoint(
    request: Request,
    status_filter: Optional[str] = Query(
        default=None,
        alias="status",
        description='"checked_in" or "checked_out"; omit for both.',
    ),
    service_date: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD). Defaults to today UTC.",
    ),
    ctx: AuthContext = Depends(require(Capability.kids_checkin)),
):
    check_status = parse_status_filter(status_filter)
    with elevated_session() as db:
        rows = list_check_ins(db, status=check_status, service_date=service_date)
        data = [to_out(db, row) for row in rows]
    return SuccessResponse[list[CheckInOut]](data=data, requestId=request_id_for(request))


@router.post(
    "",
    response_model=SuccessResponse[CheckInOut],
    status_code=status.HTTP_201_CREATED,
    summary="Check a child in",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def create_check_in_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.kids_checkin)),
    payload: CheckInCreate = Depends(validated_body(CheckInCreate)),
):
    """Exactly one of `member_child_id` / `visitor_child_id` must be given."""
    validate_child_reference(payload)
    with elevated_session() as db:
        check_in = create_check_in(db, payload, checked_in_by=ctx.identity.id)
        data = to_out(db, check_in)
    return SuccessResponse[CheckInOut](data=data, requestId=request_id_for(request))


@router.put(
    "",
    response_model=SuccessResponse[CheckInOut],
    summary="Check a child out",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def check_out_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.kids_checkin)),
    payload: CheckOutRequest = Depends(validated_body(CheckOutRequest)),
):
    with elevated_session() as db:
        check_in = check_out(db, payload, checked_out_by=ctx.identity.id)
        data = to_out(db, check_in)
    return SuccessResponse[CheckInOut](data=data, requestId=request_id_for(request))
