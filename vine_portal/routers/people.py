"""
People router.

GET  /api/me/permissions: any role; capability flags for the portal UI
GET  /api/members: manage-members
POST /api/volunteers: public sign-up form
GET  /api/volunteers: admin-panel
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from vine_portal.core.errors import request_id_for
from vine_portal.db.base import elevated_session
from vine_portal.models.user import UserRole
from vine_portal.schemas.common import ERROR_RESPONSES, SuccessResponse
from vine_portal.schemas.people import MemberProfileOut, PermissionsOut, VolunteerCreate, VolunteerOut
from vine_portal.services.gateway import AuthContext, require
from vine_portal.services.people import create_volunteer, list_members, list_volunteers, validate_volunteer
from vine_portal.services.permissions import Capability, permission_flags, role_label

router = APIRouter(prefix="/api", tags=["people"])


@router.get(
    "/me/permissions",
    response_model=SuccessResponse[PermissionsOut],
    summary="Role and capability flags of the caller",
    responses=ERROR_RESPONSES,
)
def my_permissions(request: Request, ctx: AuthContext = Depends(require())):
    role = UserRole(ctx.role)
    data = PermissionsOut(
        id=ctx.identity.id,
        email=ctx.identity.email,
        role=role.value,
        roleLabel={"pt": role_label(role, "pt"), "en": role_label(role, "en")},
        permissions=permission_flags(role),
    )
    return SuccessResponse[PermissionsOut](data=data, requestId=request_id_for(request))


@router.get(
    "/members",
    response_model=SuccessResponse[list[MemberProfileOut]],
    summary="Member directory, newest first",
    responses=ERROR_RESPONSES,
)
def list_members_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.manage_members)),
):
    with elevated_session() as db:
        data = [MemberProfileOut.model_validate(m) for m in list_members(db)]
    return SuccessResponse[list[MemberProfileOut]](data=data, requestId=request_id_for(request))


@router.post(
    "/volunteers",
    response_model=SuccessResponse[VolunteerOut],
    status_code=status.HTTP_201_CREATED,
    summary="Volunteer sign-up",
    responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]},
)
def create_volunteer_endpoint(payload: VolunteerCreate, request: Request):
    """Phone needs at least 10 digits; email is optional but must look valid."""
    payload = validate_volunteer(payload)
    with elevated_session() as db:
        data = VolunteerOut.model_validate(create_volunteer(db, payload))
    return SuccessResponse[VolunteerOut](data=data, requestId=request_id_for(request))


@router.get(
    "/volunteers",
    response_model=SuccessResponse[list[VolunteerOut]],
    summary="Volunteer sign-ups, newest first",
    responses=ERROR_RESPONSES,
)
def list_volunteers_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.admin_panel)),
):
    with elevated_session() as db:
        data = [VolunteerOut.model_validate(v) for v in list_volunteers(db)]
    return SuccessResponse[list[VolunteerOut]](data=data, requestId=request_id_for(request))
