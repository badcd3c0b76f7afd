from services.classes_service.schemas.main import (
    BulkDeleteRequest,
    BulkDeleteResult,
    CalendarEvent,
    ClassCreate,
    ClassDetailResponse,
    ClassResponse,
    ClassUpdate,
    ConflictCheckResult,
    ConflictTimes,
    GenerateSessionsRequest,
    GenerateSessionsResponse,
    InstructorResponse,
    MainPageScheduleSummary,
    NextSession,
    ScheduleConflict,
    ScheduleReplaceRequest,
    ScheduleResponse,
    ScheduleSlot,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
    WeeklySchedule,
)

__all__ = [
    "BulkDeleteRequest",
    "BulkDeleteResult",
    "CalendarEvent",
    "ClassCreate",
    "ClassDetailResponse",
    "ClassResponse",
    "ClassUpdate",
    "ConflictCheckResult",
    "ConflictTimes",
    "GenerateSessionsRequest",
    "GenerateSessionsResponse",
    "InstructorResponse",
    "MainPageScheduleSummary",
    "NextSession",
    "ScheduleConflict",
    "ScheduleReplaceRequest",
    "ScheduleResponse",
    "ScheduleSlot",
    "SessionCreate",
    "SessionResponse",
    "SessionUpdate",
    "WeeklySchedule",
]
