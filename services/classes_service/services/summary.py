"""Public-facing summary of when classes run, cached with single-flight refresh."""

import uuid
from datetime import time
from typing import Callable, NamedTuple, Optional, Sequence

from libs.common.cache import SingleFlightCache
from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.classes_service.errors import StoreFailureError, store_errors
from services.classes_service.models import Class, ClassSchedule, DayOfWeek, Program
from services.classes_service.schemas import MainPageScheduleSummary
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

# Ages at or above this are treated as "no upper bound"
OPEN_ENDED_AGE = 100


class ScheduleSummaryRow(NamedTuple):
    day_of_week: DayOfWeek
    start_time: time
    program_id: uuid.UUID
    min_age: Optional[int]
    max_age: Optional[int]
    duration_minutes: Optional[int]
    max_capacity: Optional[int]


def format_time_12h(value: time) -> str:
    """Format as e.g. ``5:45 PM``; midnight is ``12:00 AM``."""
    hour = value.hour % 12 or 12
    period = "PM" if value.hour >= 12 else "AM"
    return f"{hour}:{value.minute:02d} {period}"


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def summarize_schedule_rows(
    rows: Sequence[ScheduleSummaryRow],
    default_min_age: Optional[int] = None,
    default_duration_minutes: Optional[int] = None,
    default_max_students: Optional[int] = None,
) -> Optional[MainPageScheduleSummary]:
    """Reduce (slot, program) rows of every active class into one summary."""
    if not rows:
        return None

    settings = get_settings()
    default_min_age = default_min_age if default_min_age is not None else settings.DEFAULT_MIN_AGE
    default_duration_minutes = default_duration_minutes or settings.DEFAULT_CLASS_DURATION_MINUTES
    default_max_students = default_max_students or settings.DEFAULT_MAX_STUDENTS

    days = sorted({DayOfWeek(row.day_of_week) for row in rows}, key=lambda d: d.weekday)
    start_times = sorted({row.start_time for row in rows})
    if len(start_times) == 1:
        time_range = format_time_12h(start_times[0])
    else:
        time_range = f"{format_time_12h(start_times[0])} - {format_time_12h(start_times[-1])}"

    programs = {row.program_id: row for row in rows}.values()

    min_ages = [p.min_age for p in programs if p.min_age is not None]
    min_age = min(min_ages) if min_ages else default_min_age
    max_ages = [p.max_age for p in programs if p.max_age is not None]
    max_age = max(max_ages) if max_ages else None
    open_ended = any(p.max_age is None or p.max_age >= OPEN_ENDED_AGE for p in programs)
    age_range = f"{min_age}+" if open_ended else f"{min_age}-{max_age}"

    durations = [p.duration_minutes for p in programs if p.duration_minutes]
    duration = (
        _round_half_up(sum(durations) / len(durations))
        if durations
        else default_duration_minutes
    )

    capacities = [p.max_capacity for p in programs if p.max_capacity]
    max_students = max(capacities) if capacities else default_max_students

    return MainPageScheduleSummary(
        days=" & ".join(day.label for day in days),
        time_range=time_range,
        age_range=age_range,
        duration=f"{duration} minutes",
        max_students=max_students,
        min_age=min_age,
        max_age=max_age,
    )


async def fetch_schedule_summary_rows(db: AsyncSession) -> list[ScheduleSummaryRow]:
    with store_errors("fetch schedule summary"):
        result = await db.execute(
            select(
                ClassSchedule.day_of_week,
                ClassSchedule.start_time,
                Program.id,
                Program.min_age,
                Program.max_age,
                Program.duration_minutes,
                Program.max_capacity,
            )
            .join(Class, Class.id == ClassSchedule.class_id)
            .join(Program, Program.id == Class.program_id)
            .where(Class.is_active.is_(True))
        )
        return [ScheduleSummaryRow(*row) for row in result.all()]


class ScheduleSummaryService:
    """Owns the summary cache; one instance per application."""

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        cache: Optional[SingleFlightCache] = None,
    ):
        self.session_factory = session_factory
        self.cache = cache or SingleFlightCache(
            ttl_seconds=get_settings().SCHEDULE_SUMMARY_CACHE_TTL_SECONDS,
            name="schedule summary",
        )

    async def get_main_page_schedule_data(self) -> Optional[MainPageScheduleSummary]:
        return await self.cache.get_or_compute(self._compute)

    def invalidate(self) -> None:
        self.cache.invalidate()

    async def _compute(self) -> Optional[MainPageScheduleSummary]:
        # A failure is cached as None for the full TTL rather than retried per call
        try:
            async with self.session_factory() as db:
                rows = await fetch_schedule_summary_rows(db)
        except StoreFailureError:
            logger.exception("Schedule summary refresh failed")
            return None
        summary = summarize_schedule_rows(rows)
        logger.info("Schedule summary refreshed (%d slots)", len(rows))
        return summary
