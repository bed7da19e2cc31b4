from datetime import datetime
from sqlalchemy import String, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from vine_portal.db.base import Base


class UserRole(str, enum.Enum):
    member = "member"
    teacher = "teacher"
    leader = "leader"
    admin = "admin"
    trainee = "trainee"


class User(Base):
    """Role assignment: one row per auth-provider identity."""
    __tablename__ = "users"

    # Identity id issued by the auth provider (uuid string).
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    role: Mapped[str] = mapped_column(
        Enum(UserRole, name="user_role_enum"), nullable=False, default=UserRole.member
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
