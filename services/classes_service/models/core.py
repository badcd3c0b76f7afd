import uuid
from datetime import date, datetime, time
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.classes_service.models.enums import (
    AttendanceStatus,
    DayOfWeek,
    EnrollmentStatus,
    ProfileRole,
    SessionStatus,
    enum_values,
)
from sqlalchemy import Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, String, Text, Time, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# PROGRAMS & INSTRUCTORS
# ============================================================================


class Program(Base):
    """A course offering; classes are concrete runs of a program."""

    __tablename__ = "programs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Either bound may be absent, meaning unbounded
    min_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    duration_minutes: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, default=60
    )
    max_capacity: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, default=20
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    classes = relationship("Class", back_populates="program")

    def __repr__(self):
        return f"<Program {self.name}>"


class Profile(Base):
    """User profile; instructors are profiles with the instructor role."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    role: Mapped[ProfileRole] = mapped_column(
        SAEnum(
            ProfileRole,
            name="profile_role_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=ProfileRole.USER,
    )

    def __repr__(self):
        return f"<Profile {self.first_name} {self.last_name} ({self.role.value})>"


# ============================================================================
# CLASSES & RECURRENCE
# ============================================================================


class Class(Base):
    __tablename__ = "classes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    program_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("programs.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Overrides the program default when set
    max_capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    instructor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True, index=True
    )
    # Soft delete flag
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    program = relationship("Program", back_populates="classes")
    instructor = relationship("Profile")
    schedules = relationship("ClassSchedule", back_populates="class_")

    def __repr__(self):
        return f"<Class {self.name}>"


class ClassSchedule(Base):
    """One weekly recurring slot of a class: a weekday and a start time."""

    __tablename__ = "class_schedules"
    __table_args__ = (
        UniqueConstraint(
            "class_id", "day_of_week", "start_time", name="uq_class_schedule_slot"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    class_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week: Mapped[DayOfWeek] = mapped_column(
        SAEnum(
            DayOfWeek,
            name="day_of_week_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    start_time: Mapped[time] = mapped_column(Time, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    class_ = relationship("Class", back_populates="schedules")

    def __repr__(self):
        return f"<ClassSchedule {self.day_of_week.value} {self.start_time}>"


# ============================================================================
# SESSIONS
# ============================================================================


class ClassSession(Base):
    """One concrete, dated occurrence of a class."""

    __tablename__ = "class_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    class_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    session_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[SessionStatus] = mapped_column(
        SAEnum(
            SessionStatus,
            name="class_session_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=SessionStatus.SCHEDULED,
        server_default="scheduled",
    )
    # Overrides the class instructor for this session only
    instructor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    class_ = relationship("Class")

    def __repr__(self):
        return f"<ClassSession {self.class_id} on {self.session_date} at {self.start_time}>"


# ============================================================================
# ENROLLMENT & ATTENDANCE
# ============================================================================


class Enrollment(Base):
    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Students live in the family/registration side of the app, no FK here
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    class_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("classes.id"), nullable=False, index=True
    )
    program_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("programs.id"), nullable=True
    )
    status: Mapped[EnrollmentStatus] = mapped_column(
        SAEnum(
            EnrollmentStatus,
            name="enrollment_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=EnrollmentStatus.ACTIVE,
        index=True,
    )
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    dropped_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    class_ = relationship("Class")

    def __repr__(self):
        return f"<Enrollment {self.student_id} in {self.class_id} ({self.status.value})>"


class Attendance(Base):
    __tablename__ = "attendance"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    class_session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("class_sessions.id"), nullable=False, index=True
    )
    class_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("classes.id"), nullable=True, index=True
    )
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    status: Mapped[AttendanceStatus] = mapped_column(
        SAEnum(
            AttendanceStatus,
            name="attendance_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=AttendanceStatus.PRESENT,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<Attendance {self.student_id} at {self.class_session_id}>"
