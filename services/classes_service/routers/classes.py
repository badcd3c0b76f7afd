import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.db.session import get_async_db
from services.classes_service.routers._shared import (
    get_schedule_summary_service,
    http_errors,
)
from services.classes_service.schemas import (
    ClassCreate,
    ClassDetailResponse,
    ClassResponse,
    ClassUpdate,
    ConflictCheckResult,
    GenerateSessionsRequest,
    GenerateSessionsResponse,
    InstructorResponse,
    NextSession,
    ScheduleReplaceRequest,
    ScheduleResponse,
    ScheduleSlot,
)
from services.classes_service.services import (
    class_service,
    conflicts,
    next_session,
    schedule_service,
    session_generator,
)
from services.classes_service.services.summary import ScheduleSummaryService
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/classes", tags=["classes"])


@router.get("", response_model=List[ClassResponse])
async def list_classes(
    program_id: Optional[uuid.UUID] = None,
    instructor_id: Optional[uuid.UUID] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_async_db),
):
    """List classes, newest first."""
    with http_errors():
        return await class_service.get_classes(
            db,
            program_id=program_id,
            instructor_id=instructor_id,
            is_active=is_active,
            search=search,
        )


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    class_in: ClassCreate,
    db: AsyncSession = Depends(get_async_db),
    summary: ScheduleSummaryService = Depends(get_schedule_summary_service),
):
    with http_errors():
        class_ = await class_service.create_class(db, class_in)
    summary.invalidate()
    return class_


@router.get("/instructors", response_model=List[InstructorResponse])
async def list_instructors(db: AsyncSession = Depends(get_async_db)):
    with http_errors():
        return await class_service.get_instructors(db)


@router.get("/{class_id}", response_model=ClassDetailResponse)
async def get_class(class_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)):
    """Class details with enrollment count, next session and recent sessions."""
    with http_errors():
        detail = await class_service.get_class_by_id(db, class_id)
    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Class not found"
        )
    return detail


@router.patch("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: uuid.UUID,
    class_in: ClassUpdate,
    db: AsyncSession = Depends(get_async_db),
    summary: ScheduleSummaryService = Depends(get_schedule_summary_service),
):
    with http_errors():
        class_ = await class_service.update_class(db, class_id, class_in)
    summary.invalidate()
    return class_


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class(
    class_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
    summary: ScheduleSummaryService = Depends(get_schedule_summary_service),
):
    """Deactivate a class. Refused with 409 while students are actively enrolled."""
    with http_errors():
        await class_service.delete_class(db, class_id)
    summary.invalidate()


@router.get("/{class_id}/next-session", response_model=Optional[NextSession])
async def get_next_session(
    class_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)
):
    with http_errors():
        return await next_session.get_next_session(db, class_id)


# ---------------------------------------------------------------------------
# Weekly schedule slots
# ---------------------------------------------------------------------------


@router.get("/{class_id}/schedules", response_model=List[ScheduleResponse])
async def list_schedules(class_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)):
    with http_errors():
        return await schedule_service.get_schedules(db, class_id)


@router.post(
    "/{class_id}/schedules",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_schedule(
    class_id: uuid.UUID,
    slot: ScheduleSlot,
    db: AsyncSession = Depends(get_async_db),
    summary: ScheduleSummaryService = Depends(get_schedule_summary_service),
):
    with http_errors():
        schedule = await schedule_service.create_schedule(
            db, class_id, slot.day_of_week, slot.start_time
        )
    summary.invalidate()
    return schedule


@router.put("/{class_id}/schedules", response_model=List[ScheduleResponse])
async def replace_schedules(
    class_id: uuid.UUID,
    request: ScheduleReplaceRequest,
    db: AsyncSession = Depends(get_async_db),
    summary: ScheduleSummaryService = Depends(get_schedule_summary_service),
):
    """Replace every weekly slot of a class with the given set."""
    with http_errors():
        schedules = await schedule_service.replace_schedules(
            db, class_id, request.schedules
        )
    summary.invalidate()
    return schedules


@router.delete(
    "/{class_id}/schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_schedule(
    class_id: uuid.UUID,
    schedule_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
    summary: ScheduleSummaryService = Depends(get_schedule_summary_service),
):
    with http_errors():
        await schedule_service.delete_schedule(db, class_id, schedule_id)
    summary.invalidate()


@router.post("/{class_id}/generate-sessions", response_model=GenerateSessionsResponse)
async def generate_sessions(
    class_id: uuid.UUID,
    request: GenerateSessionsRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Materialize sessions from the weekly slots over an inclusive date range."""
    with http_errors():
        created = await session_generator.generate_sessions(
            db,
            class_id,
            request.start_date,
            request.end_date,
            request.exclude_dates,
        )
    return GenerateSessionsResponse(class_id=class_id, sessions_created=created)


@router.get("/{class_id}/conflicts", response_model=ConflictCheckResult)
async def check_conflicts(
    class_id: uuid.UUID,
    student_id: uuid.UUID = Query(..., description="Student about to enroll"),
    db: AsyncSession = Depends(get_async_db),
):
    """Check whether enrolling the student in this class clashes with their active classes."""
    with http_errors():
        return await conflicts.check_conflicts(db, student_id, class_id)
