"""Classes Service models package."""

from services.classes_service.models.core import (
    Attendance,
    Class,
    ClassSchedule,
    ClassSession,
    Enrollment,
    Profile,
    Program,
)
from services.classes_service.models.enums import (
    AttendanceStatus,
    DayOfWeek,
    EnrollmentStatus,
    ProfileRole,
    SessionStatus,
)

__all__ = [
    "Attendance",
    "AttendanceStatus",
    "Class",
    "ClassSchedule",
    "ClassSession",
    "DayOfWeek",
    "Enrollment",
    "EnrollmentStatus",
    "Profile",
    "ProfileRole",
    "Program",
    "SessionStatus",
]
