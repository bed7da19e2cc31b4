from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, ForeignKey, JSON, func
from sqlalchemy.orm import Mapped, mapped_column

from vine_portal.db.base import Base


class MemberProfile(Base):
    """A member's self-maintained profile; `user_id` links it to an identity."""
    __tablename__ = "member_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    # "male" | "female"; spouse matching pairs different values
    gender: Mapped[str | None] = mapped_column(String(16), nullable=True)
    is_baptized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pays_tithe: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    volunteer_areas: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    volunteer_outros_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    life_group: Mapped[str | None] = mapped_column(String(256), nullable=True)
    is_married: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    spouse_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    spouse_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("member_profiles.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Child(Base):
    """A member's child; parent2 is optional."""
    __tablename__ = "children"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    parent1_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("member_profiles.id"), nullable=False, index=True
    )
    parent2_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("member_profiles.id"), nullable=True
    )
    allergies: Mapped[str | None] = mapped_column(Text, nullable=True)
    medical_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_needs: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_permission: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
