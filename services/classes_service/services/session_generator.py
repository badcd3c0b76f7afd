"""Materialize dated class sessions from weekly recurrence slots."""

import uuid
from datetime import date, time, timedelta
from typing import Iterator, Optional, Sequence

from libs.common.config import get_settings
from libs.common.datetime_utils import add_minutes
from libs.common.logging import get_logger
from services.classes_service.errors import NotFoundError, store_errors
from services.classes_service.models import (
    Attendance,
    Class,
    ClassSchedule,
    ClassSession,
    DayOfWeek,
    Program,
    SessionStatus,
)
from services.classes_service.services.schedule_service import (
    get_schedules,
    schedule_sort_key,
)
from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def expand_recurrence(
    schedules: Sequence[ClassSchedule],
    start_date: date,
    end_date: date,
) -> Iterator[tuple[date, time]]:
    """Yield (session_date, start_time) for every slot in [start_date, end_date].

    Duplicate (day, start_time) rows are collapsed into one occurrence.
    """
    slots_by_weekday: dict[int, list[time]] = {}
    for schedule in sorted(schedules, key=schedule_sort_key):
        weekday = DayOfWeek(schedule.day_of_week).weekday
        times = slots_by_weekday.setdefault(weekday, [])
        if schedule.start_time not in times:
            times.append(schedule.start_time)

    current = start_date
    while current <= end_date:
        for start_time in slots_by_weekday.get(current.weekday(), []):
            yield current, start_time
        current += timedelta(days=1)


async def generate_sessions(
    db: AsyncSession,
    class_id: uuid.UUID,
    start_date: date,
    end_date: date,
    exclude_dates: Optional[Sequence[date]] = None,
) -> int:
    """Create sessions for a class over an inclusive date range.

    Returns the number of rows created, counted before excluded dates are
    removed. Excluded dates are deleted after generation, including any
    sessions the class already had on those dates unless they have
    attendance. Insert and exclusion commit together. Re-running over the
    same range creates duplicate rows.
    """
    settings = get_settings()

    with store_errors("fetch class"):
        result = await db.execute(
            select(Class, Program.duration_minutes)
            .join(Program, Program.id == Class.program_id)
            .where(Class.id == class_id)
        )
        row = result.first()
    if row is None:
        raise NotFoundError(f"Class {class_id} not found")
    class_, duration_minutes = row
    duration_minutes = duration_minutes or settings.DEFAULT_CLASS_DURATION_MINUTES

    schedules = await get_schedules(db, class_id)
    rows = [
        {
            "id": uuid.uuid4(),
            "class_id": class_id,
            "session_date": session_date,
            "start_time": start_time,
            "end_time": add_minutes(start_time, duration_minutes),
            "status": SessionStatus.SCHEDULED,
            "instructor_id": class_.instructor_id,
        }
        for session_date, start_time in expand_recurrence(
            schedules, start_date, end_date
        )
    ]

    with store_errors("generate sessions"):
        if rows:
            await db.execute(insert(ClassSession), rows)
        if exclude_dates:
            # Sessions that already carry attendance are never removed
            await db.execute(
                delete(ClassSession).where(
                    ClassSession.class_id == class_id,
                    ClassSession.session_date.in_(list(exclude_dates)),
                    ~select(Attendance.id)
                    .where(Attendance.class_session_id == ClassSession.id)
                    .exists(),
                )
            )
        await db.commit()

    logger.info(
        "Generated %d sessions for class %s between %s and %s",
        len(rows),
        class_id,
        start_date,
        end_date,
    )
    return len(rows)
