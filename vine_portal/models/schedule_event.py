from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from vine_portal.db.base import Base


class ScheduleEventType(str, enum.Enum):
    weekly_recurring = "weekly_recurring"
    special = "special"


class ScheduleEvent(Base):
    """Bilingual service schedule entry shown on the public schedule page."""
    __tablename__ = "schedule_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title_pt: Mapped[str] = mapped_column(String(256), nullable=False)
    title_en: Mapped[str] = mapped_column(String(256), nullable=False)
    description_pt: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_en: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_type: Mapped[str] = mapped_column(
        Enum(ScheduleEventType, name="schedule_event_type_enum"), nullable=False
    )
    # 0 = Sunday … 6 = Saturday; null for special events.
    day_of_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    time: Mapped[str | None] = mapped_column(String(32), nullable=True)
    icon_name: Mapped[str] = mapped_column(String(64), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    frequency_pt: Mapped[str | None] = mapped_column(String(128), nullable=True)
    frequency_en: Mapped[str | None] = mapped_column(String(128), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
