"""
Member directory, volunteer sign-up and permission schemas.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from vine_portal.schemas.common import NotBlank, RequiredStr


class MemberProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[str] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None


class VolunteerCreate(BaseModel):
    name: RequiredStr
    phone: RequiredStr
    description: RequiredStr
    areas: Annotated[list[str], NotBlank, Field(examples=[["kids", "worship"]])]
    email: Optional[str] = None


class VolunteerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    phone: str
    description: str
    areas: list[str]
    created_at: Optional[datetime] = None


class PermissionsOut(BaseModel):
    id: str
    email: Optional[str] = None
    role: str
    roleLabel: dict[str, str]
    permissions: dict[str, bool]
