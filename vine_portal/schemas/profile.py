"""
Member self-service schemas.

GET/POST/PUT /api/member-profile     → MemberProfileIn → MyProfileOut / MemberProfileDetailOut
GET/POST/PUT/DELETE /api/children    → ChildCreate / ChildUpdate → ChildOut
GET /api/available-spouses           → AvailableSpousesOut
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from vine_portal.schemas.common import RequiredDate, RequiredInt, RequiredStr

Gender = Literal["male", "female"]


class MemberProfileIn(BaseModel):
    """Body of both POST and PUT; a PUT rewrites every field."""
    name: RequiredStr
    phone: RequiredStr
    email: RequiredStr
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    is_baptized: bool = False
    pays_tithe: bool = False
    volunteer_areas: list[str] = Field(default_factory=list, examples=[["kids", "outros"]])
    volunteer_outros_details: Optional[str] = None
    life_group: Optional[str] = None
    is_married: bool = False
    spouse_name: Optional[str] = None
    spouse_id: Optional[int] = Field(default=None, description="Profile id of a registered spouse.")


class MemberProfileDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[str] = None
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    is_baptized: bool
    pays_tithe: bool
    volunteer_areas: list[str]
    volunteer_outros_details: Optional[str] = None
    life_group: Optional[str] = None
    is_married: bool
    spouse_name: Optional[str] = None
    spouse_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MyProfileOut(BaseModel):
    profile: Optional[MemberProfileDetailOut] = None
    role: str


class ChildCreate(BaseModel):
    name: Optional[str] = None
    date_of_birth: RequiredDate
    parent1_id: RequiredInt
    parent2_id: Optional[int] = None
    allergies: Optional[str] = None
    medical_notes: Optional[str] = None
    special_needs: Optional[str] = None
    photo_permission: bool = True


class ChildUpdate(BaseModel):
    """Partial update; only the fields sent are written."""
    id: RequiredInt
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    parent1_id: Optional[int] = None
    parent2_id: Optional[int] = None
    allergies: Optional[str] = None
    medical_notes: Optional[str] = None
    special_needs: Optional[str] = None
    photo_permission: Optional[bool] = None


class ChildOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    date_of_birth: date
    parent1_id: int
    parent2_id: Optional[int] = None
    allergies: Optional[str] = None
    medical_notes: Optional[str] = None
    special_needs: Optional[str] = None
    photo_permission: bool
    created_at: Optional[datetime] = None


class SpouseCandidateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: Optional[str] = None
    is_married: bool
    spouse_id: Optional[int] = None
    gender: Optional[str] = None


class AvailableSpousesOut(BaseModel):
    candidates: list[SpouseCandidateOut] = Field(default_factory=list)
    warning: Optional[Literal["missing_gender"]] = Field(
        default=None,
        description="Set when the caller has no gender on file; no candidates are listed.",
    )
