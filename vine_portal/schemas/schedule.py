"""
Schedule event schemas.

event_type is taken as plain text so the service can answer with a precise
INVALID_EVENT_TYPE error instead of a generic enum failure.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vine_portal.schemas.common import NonBlankStr, RequiredStr


class ScheduleEventCreate(BaseModel):
    title_pt: RequiredStr
    title_en: RequiredStr
    event_type: RequiredStr = Field(examples=["weekly_recurring", "special"])
    icon_name: RequiredStr
    description_pt: Optional[str] = None
    description_en: Optional[str] = None
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    time: Optional[str] = None
    display_order: int = 0
    special_date: Optional[date] = None
    frequency_pt: Optional[str] = None
    frequency_en: Optional[str] = None
    is_active: bool = True


class ScheduleEventUpdate(BaseModel):
    title_pt: Optional[NonBlankStr] = None
    title_en: Optional[NonBlankStr] = None
    event_type: Optional[NonBlankStr] = None
    icon_name: Optional[NonBlankStr] = None
    description_pt: Optional[str] = None
    description_en: Optional[str] = None
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    time: Optional[str] = None
    display_order: Optional[int] = None
    special_date: Optional[date] = None
    frequency_pt: Optional[str] = None
    frequency_en: Optional[str] = None
    is_active: Optional[bool] = None


class ScheduleEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title_pt: str
    title_en: str
    description_pt: Optional[str] = None
    description_en: Optional[str] = None
    event_type: str
    day_of_week: Optional[int] = None
    time: Optional[str] = None
    icon_name: str
    display_order: int
    special_date: Optional[date] = None
    frequency_pt: Optional[str] = None
    frequency_en: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
