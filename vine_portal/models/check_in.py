from datetime import datetime, date
from sqlalchemy import Integer, String, Text, DateTime, Date, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from vine_portal.db.base import Base


class CheckInStatus(str, enum.Enum):
    checked_in = "checked_in"
    checked_out = "checked_out"


class CheckIn(Base):
    """Kids check-in record. Exactly one of member_child_id / visitor_child_id is set."""
    __tablename__ = "check_ins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    service_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    service_time: Mapped[str] = mapped_column(String(16), nullable=False)
    member_child_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("children.id"), nullable=True
    )
    visitor_child_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("visitor_children.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        Enum(CheckInStatus, name="check_in_status_enum"),
        nullable=False,
        default=CheckInStatus.checked_in,
    )
    checked_in_by: Mapped[str] = mapped_column(String(64), nullable=False)
    checked_in_by_name: Mapped[str] = mapped_column(String(256), nullable=False)
    checkin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    checked_in_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    checked_out_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    checked_out_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    checked_out_by_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    checkout_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
