"""Enum definitions for classes service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class DayOfWeek(str, enum.Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def weekday(self) -> int:
        """Python ``date.weekday()`` number (Monday=0, Sunday=6)."""
        return _WEEK_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        return _WEEK_ORDER[weekday]


_WEEK_ORDER = list(DayOfWeek)


class SessionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"
    DROPPED = "dropped"
    WAITLIST = "waitlist"


class ProfileRole(str, enum.Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    USER = "user"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"
    LATE = "late"
