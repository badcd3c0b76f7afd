import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.db.session import get_async_db
from services.classes_service.models import SessionStatus
from services.classes_service.routers._shared import http_errors
from services.classes_service.schemas import (
    BulkDeleteRequest,
    BulkDeleteResult,
    CalendarEvent,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
    WeeklySchedule,
)
from services.classes_service.services import calendar, class_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/classes/sessions", tags=["class-sessions"])


@router.get("", response_model=List[SessionResponse])
async def list_sessions(
    class_id: Optional[uuid.UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    session_status: Optional[SessionStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_async_db),
):
    with http_errors():
        return await class_service.get_sessions(
            db,
            class_id=class_id,
            date_from=date_from,
            date_to=date_to,
            status=session_status,
        )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    session_in: SessionCreate, db: AsyncSession = Depends(get_async_db)
):
    with http_errors():
        return await class_service.create_session(db, session_in)


@router.post("/bulk-delete", response_model=BulkDeleteResult)
async def bulk_delete_sessions(
    request: BulkDeleteRequest, db: AsyncSession = Depends(get_async_db)
):
    """Delete sessions in a date range. Sessions with attendance are skipped, not deleted."""
    with http_errors():
        return await class_service.bulk_delete_sessions(
            db,
            request.date_from,
            request.date_to,
            class_id=request.class_id,
            status=request.status,
        )


@router.get("/calendar", response_model=List[CalendarEvent])
async def get_calendar(
    start_date: date,
    end_date: date,
    class_ids: Optional[List[uuid.UUID]] = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    with http_errors():
        return await calendar.get_calendar_events(db, start_date, end_date, class_ids)


@router.get("/weekly", response_model=WeeklySchedule)
async def get_weekly_schedule(
    week_start: date,
    class_ids: Optional[List[uuid.UUID]] = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    with http_errors():
        return await calendar.get_weekly_schedule(db, week_start, class_ids)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)):
    with http_errors():
        session = await class_service.get_session(db, session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return session


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: uuid.UUID,
    session_in: SessionUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    with http_errors():
        return await class_service.update_session(db, session_id, session_in)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)
):
    """Delete one session. Refused with 409 once attendance has been recorded."""
    with http_errors():
        await class_service.delete_session(db, session_id)
