import uuid
from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from services.classes_service.models import DayOfWeek, SessionStatus

# ============================================================================
# CLASSES
# ============================================================================


class ClassBase(BaseModel):
    program_id: uuid.UUID
    name: str
    description: Optional[str] = None
    max_capacity: Optional[int] = Field(None, gt=0)
    instructor_id: Optional[uuid.UUID] = None


class ClassCreate(ClassBase):
    is_active: bool = True


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    max_capacity: Optional[int] = Field(None, gt=0)
    instructor_id: Optional[uuid.UUID] = None
    is_active: Optional[bool] = None


class ClassResponse(ClassBase):
    id: uuid.UUID
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InstructorResponse(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# RECURRENCE
# ============================================================================


class ScheduleSlot(BaseModel):
    day_of_week: DayOfWeek
    start_time: time


class ScheduleResponse(ScheduleSlot):
    id: uuid.UUID
    class_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)


class ScheduleReplaceRequest(BaseModel):
    schedules: list[ScheduleSlot] = Field(default_factory=list)


class GenerateSessionsRequest(BaseModel):
    start_date: date
    end_date: date = Field(..., description="Inclusive")
    exclude_dates: list[date] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class GenerateSessionsResponse(BaseModel):
    class_id: uuid.UUID
    sessions_created: int


# ============================================================================
# SESSIONS
# ============================================================================


class SessionBase(BaseModel):
    session_date: date
    start_time: time
    end_time: time
    notes: Optional[str] = None
    instructor_id: Optional[uuid.UUID] = None


class SessionCreate(SessionBase):
    class_id: uuid.UUID


class SessionUpdate(BaseModel):
    session_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: Optional[SessionStatus] = None
    notes: Optional[str] = None
    instructor_id: Optional[uuid.UUID] = None


class SessionResponse(SessionBase):
    id: uuid.UUID
    class_id: uuid.UUID
    status: SessionStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BulkDeleteRequest(BaseModel):
    date_from: date
    date_to: date
    class_id: Optional[uuid.UUID] = None
    status: Optional[SessionStatus] = None


class BulkDeleteResult(BaseModel):
    deleted_count: int = 0
    skipped_count: int = 0
    errors: list[str] = Field(default_factory=list)


class NextSession(BaseModel):
    """Next occurrence of a class, persisted or computed from its weekly slots."""

    id: Optional[uuid.UUID] = None  # None for a computed occurrence
    session_date: date
    start_time: time
    end_time: time
    status: SessionStatus = SessionStatus.SCHEDULED
    is_virtual: bool = False


class ClassDetailResponse(ClassResponse):
    program_name: Optional[str] = None
    enrollment_count: int = 0
    next_session: Optional[NextSession] = None
    recent_sessions: list[SessionResponse] = Field(default_factory=list)
    schedules: list[ScheduleResponse] = Field(default_factory=list)


# ============================================================================
# CONFLICTS
# ============================================================================


class ConflictTimes(BaseModel):
    existing_start: time
    new_start: time


class ScheduleConflict(BaseModel):
    student_id: uuid.UUID
    conflicting_class_id: uuid.UUID
    conflicting_class_name: str
    conflict_days: list[DayOfWeek]
    conflict_times: ConflictTimes


class ConflictCheckResult(BaseModel):
    has_conflicts: bool = False
    conflicts: list[ScheduleConflict] = Field(default_factory=list)


# ============================================================================
# CALENDAR
# ============================================================================


class CalendarEvent(BaseModel):
    id: uuid.UUID
    title: str
    start: datetime
    end: datetime
    type: Literal["session"] = "session"
    class_id: uuid.UUID
    session_id: uuid.UUID
    program_name: Optional[str] = None
    max_capacity: Optional[int] = None
    enrollment_count: int = 0
    status: SessionStatus


class WeeklySchedule(BaseModel):
    monday: list[CalendarEvent] = Field(default_factory=list)
    tuesday: list[CalendarEvent] = Field(default_factory=list)
    wednesday: list[CalendarEvent] = Field(default_factory=list)
    thursday: list[CalendarEvent] = Field(default_factory=list)
    friday: list[CalendarEvent] = Field(default_factory=list)
    saturday: list[CalendarEvent] = Field(default_factory=list)
    sunday: list[CalendarEvent] = Field(default_factory=list)

    def bucket(self, day: DayOfWeek) -> list[CalendarEvent]:
        return getattr(self, day.value)


# ============================================================================
# PUBLIC SUMMARY
# ============================================================================


class MainPageScheduleSummary(BaseModel):
    days: str
    time_range: str
    age_range: str
    duration: str
    max_students: int
    min_age: int
    max_age: Optional[int] = None
