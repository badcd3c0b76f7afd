"""Calendar and weekly-grid projections of materialized class sessions."""

import uuid
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from libs.common.datetime_utils import combine_local, school_timezone
from services.classes_service.errors import store_errors
from services.classes_service.models import (
    Class,
    ClassSession,
    DayOfWeek,
    Enrollment,
    EnrollmentStatus,
    Program,
)
from services.classes_service.schemas import CalendarEvent, WeeklySchedule
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


def build_calendar_event(
    session: ClassSession,
    class_name: Optional[str],
    program_name: Optional[str] = None,
    max_capacity: Optional[int] = None,
    enrollment_count: int = 0,
    tz: Optional[ZoneInfo] = None,
) -> CalendarEvent:
    tz = tz or school_timezone()
    start = combine_local(session.session_date, session.start_time, tz)
    end = combine_local(session.session_date, session.end_time, tz) if session.end_time else start
    return CalendarEvent(
        id=session.id,
        title=class_name or "Class Session",
        start=start,
        end=end,
        class_id=session.class_id,
        session_id=session.id,
        program_name=program_name,
        max_capacity=max_capacity,
        enrollment_count=enrollment_count,
        status=session.status,
    )


def group_weekly(events: Iterable[CalendarEvent]) -> WeeklySchedule:
    """Bucket events by weekday and sort each bucket by start."""
    schedule = WeeklySchedule()
    for event in events:
        schedule.bucket(DayOfWeek.from_weekday(event.start.weekday())).append(event)
    for day in DayOfWeek:
        schedule.bucket(day).sort(key=lambda event: event.start)
    return schedule


async def _active_enrollment_counts(
    db: AsyncSession, class_ids: Sequence[uuid.UUID]
) -> dict[uuid.UUID, int]:
    if not class_ids:
        return {}
    with store_errors("count enrollments"):
        result = await db.execute(
            select(Enrollment.class_id, func.count(Enrollment.id))
            .where(
                Enrollment.class_id.in_(class_ids),
                Enrollment.status == EnrollmentStatus.ACTIVE,
            )
            .group_by(Enrollment.class_id)
        )
        return {class_id: count for class_id, count in result.all()}


async def get_calendar_events(
    db: AsyncSession,
    start_date: date,
    end_date: date,
    class_ids: Optional[Sequence[uuid.UUID]] = None,
) -> list[CalendarEvent]:
    query = (
        select(ClassSession, Class.name, Class.max_capacity, Program.name)
        .join(Class, Class.id == ClassSession.class_id)
        .outerjoin(Program, Program.id == Class.program_id)
        .where(
            ClassSession.session_date >= start_date,
            ClassSession.session_date <= end_date,
        )
    )
    if class_ids:
        query = query.where(ClassSession.class_id.in_(list(class_ids)))
    query = query.order_by(ClassSession.session_date, ClassSession.start_time)

    with store_errors("fetch calendar events"):
        result = await db.execute(query)
        rows = result.all()

    counts = await _active_enrollment_counts(
        db, list({session.class_id for session, *_ in rows})
    )
    tz = school_timezone()
    return [
        build_calendar_event(
            session,
            class_name,
            program_name,
            max_capacity,
            counts.get(session.class_id, 0),
            tz,
        )
        for session, class_name, max_capacity, program_name in rows
    ]


async def get_weekly_schedule(
    db: AsyncSession,
    week_start: date,
    class_ids: Optional[Sequence[uuid.UUID]] = None,
) -> WeeklySchedule:
    events = await get_calendar_events(
        db, week_start, week_start + timedelta(days=6), class_ids
    )
    return group_weekly(events)
