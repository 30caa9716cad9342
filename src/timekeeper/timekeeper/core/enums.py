from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for access checks."""

    ADMIN = "admin"
    USER = "user"


class AttendanceAction(str, Enum):
    CLOCK_IN = "clock-in"
    CLOCK_OUT = "clock-out"


class Workplace(str, Enum):
    OFFICE = "office"
    HOME = "home"


class ClockStatus(str, Enum):
    CLOCKED_IN = "clocked-in"
    CLOCKED_OUT = "clocked-out"


class DayStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    EMERGENCY = "emergency"
    OTHER = "other"


class LeaveStatus(str, Enum):
    """Leave approval workflow state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
