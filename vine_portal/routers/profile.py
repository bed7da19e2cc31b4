"""
Member self-service router (profile capability).

GET    /api/member-profile: the caller's profile (or null) and role
POST   /api/member-profile: create the caller's profile
PUT    /api/member-profile: rewrite the caller's profile
GET    /api/children?parent_id=: children of one parent
POST   /api/children: register a member's child
PUT    /api/children: update a member's child
DELETE /api/children?id=: remove a member's child
GET    /api/available-spouses: unlinked profiles of a different gender
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from vine_portal.core.errors import request_id_for
from vine_portal.db.base import elevated_session
from vine_portal.schemas.common import ERROR_RESPONSES, ErrorResponse, SuccessResponse
from vine_portal.schemas.profile import (
    AvailableSpousesOut,
    ChildCreate,
    ChildOut,
    ChildUpdate,
    MemberProfileDetailOut,
    MemberProfileIn,
    MyProfileOut,
    SpouseCandidateOut,
)
from vine_portal.services.gateway import AuthContext, require, validated_body
from vine_portal.services.permissions import Capability
from vine_portal.services.profile import (
    available_spouses,
    create_child,
    create_own_profile,
    delete_child,
    get_own_profile,
    list_children,
    update_child,
    update_own_profile,
)

router = APIRouter(prefix="/api", tags=["profile"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Profile, parent or child absent."}}


@router.get(
    "/member-profile",
    response_model=SuccessResponse[MyProfileOut],
    summary="The caller's member profile",
    responses=ERROR_RESPONSES,
)
def get_my_profile_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
):
    with elevated_session() as db:
        profile = get_own_profile(db, ctx.identity.id)
        data = MyProfileOut(
            profile=MemberProfileDetailOut.model_validate(profile) if profile else None,
            role=ctx.role.value,
        )
    return SuccessResponse[MyProfileOut](data=data, requestId=request_id_for(request))


@router.post(
    "/member-profile",
    response_model=SuccessResponse[MemberProfileDetailOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create the caller's member profile",
    responses={
        **ERROR_RESPONSES,
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Profile already exists."},
    },
)
def create_my_profile_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
    payload: MemberProfileIn = Depends(validated_body(MemberProfileIn)),
):
    with elevated_session() as db:
        data = MemberProfileDetailOut.model_validate(create_own_profile(db, ctx.identity.id, payload))
    return SuccessResponse[MemberProfileDetailOut](data=data, requestId=request_id_for(request))


@router.put(
    "/member-profile",
    response_model=SuccessResponse[MemberProfileDetailOut],
    summary="Rewrite the caller's member profile",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def update_my_profile_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
    payload: MemberProfileIn = Depends(validated_body(MemberProfileIn)),
):
    with elevated_session() as db:
        data = MemberProfileDetailOut.model_validate(update_own_profile(db, ctx.identity.id, payload))
    return SuccessResponse[MemberProfileDetailOut](data=data, requestId=request_id_for(request))


@router.get(
    "/children",
    response_model=SuccessResponse[list[ChildOut]],
    summary="Children of one parent, oldest first",
    responses=ERROR_RESPONSES,
)
def list_children_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
    parent_id: int = Query(description="Member profile id of either parent."),
):
    with elevated_session() as db:
        data = [ChildOut.model_validate(c) for c in list_children(db, ctx, parent_id)]
    return SuccessResponse[list[ChildOut]](data=data, requestId=request_id_for(request))


@router.post(
    "/children",
    response_model=SuccessResponse[ChildOut],
    status_code=status.HTTP_201_CREATED,
    summary="Register a member's child",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def create_child_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
    payload: ChildCreate = Depends(validated_body(ChildCreate)),
):
    """Photo permission defaults to granted."""
    with elevated_session() as db:
        data = ChildOut.model_validate(create_child(db, ctx, payload))
    return SuccessResponse[ChildOut](data=data, requestId=request_id_for(request))


@router.put(
    "/children",
    response_model=SuccessResponse[ChildOut],
    summary="Update a member's child",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def update_child_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
    payload: ChildUpdate = Depends(validated_body(ChildUpdate)),
):
    with elevated_session() as db:
        data = ChildOut.model_validate(update_child(db, ctx, payload))
    return SuccessResponse[ChildOut](data=data, requestId=request_id_for(request))


@router.delete(
    "/children",
    response_model=SuccessResponse[dict],
    summary="Remove a member's child",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def delete_child_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
    child_id: int = Query(alias="id"),
):
    with elevated_session() as db:
        delete_child(db, ctx, child_id)
    return SuccessResponse[dict](data={"id": child_id, "deleted": True}, requestId=request_id_for(request))


@router.get(
    "/available-spouses",
    response_model=SuccessResponse[AvailableSpousesOut],
    summary="Profiles the caller can link as spouse",
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
)
def available_spouses_endpoint(
    request: Request,
    ctx: AuthContext = Depends(require(Capability.profile)),
):
    """Empty with `warning = "missing_gender"` while the caller has no gender on file."""
    with elevated_session() as db:
        found = available_spouses(db, ctx.identity.id)
        data = AvailableSpousesOut(
            candidates=[SpouseCandidateOut.model_validate(p) for p in found.candidates],
            warning=found.warning,
        )
    return SuccessResponse[AvailableSpousesOut](data=data, requestId=request_id_for(request))
