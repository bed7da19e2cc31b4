"""
Kids check-in schemas.

GET  /api/check-ins   → list[CheckInOut]
POST /api/check-ins   → CheckInCreate   → CheckInOut
PUT  /api/check-ins   → CheckOutRequest → CheckInOut
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from vine_portal.schemas.common import RequiredDate, RequiredInt, RequiredStr


class CheckInCreate(BaseModel):
    service_date: RequiredDate
    service_time: RequiredStr
    checked_in_by_name: RequiredStr
    member_child_id: Optional[int] = None
    visitor_child_id: Optional[int] = None
    checkin_notes: Optional[str] = None


class CheckOutRequest(BaseModel):
    id: RequiredInt
    checked_out_by_name: RequiredStr
    checkout_notes: Optional[str] = None


class CheckInChildOut(BaseModel):
    kind: Literal["member", "visitor"]
    id: int
    name: Optional[str] = None
    date_of_birth: date
    allergies: Optional[str] = None
    special_needs: Optional[str] = None
    photo_permission: bool


class CheckInOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_date: date
    service_time: str
    member_child_id: Optional[int] = None
    visitor_child_id: Optional[int] = None
    status: str
    checked_in_by: str
    checked_in_by_name: str
    checkin_notes: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None
    checked_out_by: Optional[str] = None
    checked_out_by_name: Optional[str] = None
    checkout_notes: Optional[str] = None
    child: Optional[CheckInChildOut] = None
