"""
Visitor registration schemas.

POST /api/visitors           → VisitorCreate → VisitorRegistrationOut
GET  /api/visitors           → list[VisitorOut]
GET/POST/PUT /api/visitor-children
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vine_portal.schemas.common import NonBlankStr, RequiredDate, RequiredInt, RequiredStr


class VisitorChildIn(BaseModel):
    """A child registered together with a visitor."""
    name: RequiredStr
    date_of_birth: RequiredDate
    allergies: Optional[str] = None
    special_needs: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    photo_permission: bool = True


class VisitorCreate(BaseModel):
    visit_date: RequiredDate = Field(examples=["2026-10-18"])
    name: RequiredStr
    phone: RequiredStr
    how_found: RequiredStr = Field(examples=["friend", "instagram", "other"])
    how_found_details: Optional[str] = None
    children: list[VisitorChildIn] = Field(
        default_factory=list,
        description="Children saved after the visitor; a failure here yields 207.",
    )


class VisitorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    visit_date: date
    name: str
    phone: str
    how_found: str
    how_found_details: Optional[str] = None
    created_at: Optional[datetime] = None


class VisitorChildCreate(BaseModel):
    name: RequiredStr
    date_of_birth: RequiredDate
    parent_name: RequiredStr
    parent_phone: RequiredStr
    parent_email: Optional[str] = None
    allergies: Optional[str] = None
    special_needs: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    photo_permission: bool = False


class VisitorChildUpdate(BaseModel):
    """Partial update; only the fields sent are written."""
    id: RequiredInt
    name: Optional[NonBlankStr] = None
    date_of_birth: Optional[date] = None
    parent_name: Optional[NonBlankStr] = None
    parent_phone: Optional[NonBlankStr] = None
    parent_email: Optional[str] = None
    allergies: Optional[str] = None
    special_needs: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    photo_permission: Optional[bool] = None


class VisitorChildOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    visitor_id: Optional[int] = None
    name: str
    date_of_birth: date
    parent_name: str
    parent_phone: str
    parent_email: Optional[str] = None
    allergies: Optional[str] = None
    special_needs: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    photo_permission: bool
    created_at: Optional[datetime] = None


class VisitorRegistrationOut(BaseModel):
    visitor: VisitorOut
    children: list[VisitorChildOut] = Field(default_factory=list)
