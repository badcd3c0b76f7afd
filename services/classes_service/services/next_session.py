"""Resolve the next upcoming occurrence of a class."""

import uuid
from datetime import datetime, timedelta
from typing import Optional, Sequence

from libs.common.datetime_utils import add_minutes, local_now, to_local
from services.classes_service.errors import store_errors
from services.classes_service.models import (
    Class,
    ClassSchedule,
    ClassSession,
    DayOfWeek,
    Program,
    SessionStatus,
)
from services.classes_service.schemas import NextSession
from services.classes_service.services.schedule_service import get_schedules
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


def days_until(schedule: ClassSchedule, as_of: datetime) -> int:
    """Days from ``as_of`` to the slot's next start; a slot already started today is a week out."""
    days = (DayOfWeek(schedule.day_of_week).weekday - as_of.weekday()) % 7
    if days == 0 and schedule.start_time <= as_of.time().replace(tzinfo=None):
        days = 7
    return days


def resolve_next_occurrence(
    schedules: Sequence[ClassSchedule],
    as_of: datetime,
    duration_minutes: Optional[int] = None,
) -> Optional[NextSession]:
    """Compute the next occurrence from weekly slots alone.

    ``as_of`` must already be in the school's wall-clock zone. Ties on the
    day count go to the earliest start time, then to row order. Without a
    duration the end time equals the start time.
    """
    if not schedules:
        return None

    # min() keeps the first of equal keys, so exact duplicates resolve by row order
    days, schedule = min(
        ((days_until(s, as_of), s) for s in schedules),
        key=lambda pair: (pair[0], pair[1].start_time),
    )
    start_time = schedule.start_time
    end_time = add_minutes(start_time, duration_minutes) if duration_minutes else start_time
    return NextSession(
        session_date=as_of.date() + timedelta(days=days),
        start_time=start_time,
        end_time=end_time,
        status=SessionStatus.SCHEDULED,
        is_virtual=True,
    )


async def get_next_session(
    db: AsyncSession,
    class_id: uuid.UUID,
    as_of: Optional[datetime] = None,
) -> Optional[NextSession]:
    """Earliest scheduled session from today on, else one computed from the weekly slots."""
    as_of = to_local(as_of) if as_of else local_now()

    with store_errors("fetch next session"):
        result = await db.execute(
            select(ClassSession)
            .where(
                ClassSession.class_id == class_id,
                ClassSession.session_date >= as_of.date(),
                ClassSession.status == SessionStatus.SCHEDULED,
            )
            .order_by(ClassSession.session_date, ClassSession.start_time)
            .limit(1)
        )
        session = result.scalar_one_or_none()

    if session is not None:
        return NextSession(
            id=session.id,
            session_date=session.session_date,
            start_time=session.start_time,
            end_time=session.end_time,
            status=session.status,
        )

    schedules = await get_schedules(db, class_id)
    if not schedules:
        return None

    with store_errors("fetch program duration"):
        result = await db.execute(
            select(Program.duration_minutes)
            .join(Class, Class.program_id == Program.id)
            .where(Class.id == class_id)
        )
        duration_minutes = result.scalar_one_or_none()

    return resolve_next_occurrence(schedules, as_of, duration_minutes)
