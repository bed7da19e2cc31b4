from .user import User, UserRole
from .visitor import Visitor, VisitorChild
from .member import MemberProfile, Child
from .check_in import CheckIn, CheckInStatus
from .schedule_event import ScheduleEvent, ScheduleEventType
from .volunteer import Volunteer

__all__ = [
    "User",
    "UserRole",
    "Visitor",
    "VisitorChild",
    "MemberProfile",
    "Child",
    "CheckIn",
    "CheckInStatus",
    "ScheduleEvent",
    "ScheduleEventType",
    "Volunteer",
]
