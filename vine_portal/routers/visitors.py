"""
Visitors router.

POST /api/visitors: public registration form (visitor + children)
GET  /api/visitors: manage-visitors
GET  /api/visitor-children: kids-checkin
POST /api/visitor-children: kids-checkin
PUT  /api/visitor-children: kids-checkin
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from vine_portal.core.errors import request_id_for
from vine_portal.db.base import elevated_session
from vine_portal.schemas.common import ERROR_RESPONSES, ErrorResponse, SuccessResponse
from vine_portal.schemas.visitor import (
    VisitorChildCreate,
    VisitorChildOut,
    VisitorChildUpdate,
    VisitorCreate,
    VisitorOut,
    VisitorRegistrationOut,
)
from vine_portal.services.gateway import AuthContext, require, validated_body
from vine_portal.services.permissions import Capability
from vine_portal.services.visitors import (
    create_visitor_child,
    list_visitor_children,
    list_visitors,
    register_visitor,
    update_visitor_child,
)

router = APIRouter(prefix="/api", tags=["visitors"])


@router.post(
    "/visitors",
    response_model=SuccessResponse[VisitorRegistrationOut],
    status_code=status.HTTP_201_CREATED,
    summary="Register a visitor and their children",
    responses={
        207: {
            "model": ErrorResponse,
            "description": "Visitor saved, children failed (`partial_failure`).",
        },
        400: ERROR_RESPONSES[400],
        500: ERROR_RESPONSES[500],
    },
)
def register_visitor_endpoint(payload: VisitorCreate, request: Request):
    """
    Save the visitor first, then their children.

    The visitor is committed before the children are written. If the children
    fail, the response is **207** with `error.type = "partial_failure"` and
    `details.visitorId`; the visitor is not rolled back.
    """
    with elevated_session() as db:
        registration = register_visitor(db, payload)
        data = VisitorRegistrationOut(
            visitor=VisitorOut.model_validate(registration.visitor),
            children=[VisitorChildOut.model_validate(c) for c in registration.children],
        )
    return SuccessResponse[VisitorRegistrationOut](data=data, requestId=request_id_for(request))


@router.get(
    "/visitors",
    response_model=SuccessResponse[list[VisitorOut]],
    summary="List visitors, most recent visit first",
    responses=ERROR_RESPONSES,
)
def list_visitors_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.manage_visitors)),
):
    with elevated_session() as db:
        data = [VisitorOut.model_validate(v) for v in list_visitors(db)]
    return SuccessResponse[list[VisitorOut]](data=data, requestId=request_id_for(request))


@router.get(
    "/visitor-children",
    response_model=SuccessResponse[list[VisitorChildOut]],
    summary="List visiting children",
    responses=ERROR_RESPONSES,
)
def list_visitor_children_endpoint(
    request: Request,
    search: Optional[str] = Query(
        default=None,
        description="Matches child name, parent name or parent phone.",
    ),
    ctx: AuthContext = Depends(require(Capability.kids_checkin)),
):
    with elevated_session() as db:
        data = [VisitorChildOut.model_validate(c) for c in list_visitor_children(db, search)]
    return SuccessResponse[list[VisitorChildOut]](data=data, requestId=request_id_for(request))


@router.post(
    "/visitor-children",
    response_model=SuccessResponse[VisitorChildOut],
    status_code=status.HTTP_201_CREATED,
    summary="Register a visiting child",
    responses=ERROR_RESPONSES,
)
def create_visitor_child_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.kids_checkin)),
    payload: VisitorChildCreate = Depends(validated_body(VisitorChildCreate)),
):
    with elevated_session() as db:
        data = VisitorChildOut.model_validate(create_visitor_child(db, payload))
    return SuccessResponse[VisitorChildOut](data=data, requestId=request_id_for(request))


@router.put(
    "/visitor-children",
    response_model=SuccessResponse[VisitorChildOut],
    summary="Update a visiting child",
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "Unknown id."}},
)
def update_visitor_child_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.kids_checkin)),
    payload: VisitorChildUpdate = Depends(validated_body(VisitorChildUpdate)),
):
    with elevated_session() as db:
        data = VisitorChildOut.model_validate(update_visitor_child(db, payload))
    return SuccessResponse[VisitorChildOut](data=data, requestId=request_id_for(request))
