"""Weekly schedule conflict detection for enrollments."""

import uuid
from datetime import time
from typing import Mapping, Optional, Sequence

from libs.common.config import get_settings
from libs.common.datetime_utils import minutes_since_midnight
from libs.common.logging import get_logger
from services.classes_service.errors import store_errors
from services.classes_service.models import (
    Class,
    ClassSchedule,
    Enrollment,
    EnrollmentStatus,
)
from services.classes_service.schemas import (
    ConflictCheckResult,
    ConflictTimes,
    ScheduleConflict,
)
from services.classes_service.services.schedule_service import (
    get_schedules_for_classes,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def slots_overlap(existing_start: time, new_start: time, duration_minutes: int) -> bool:
    """Half-open overlap of [start, start + duration) for two same-day slots.

    Back-to-back slots (one ends exactly when the other starts) do not overlap.
    """
    existing_begin = minutes_since_midnight(existing_start)
    new_begin = minutes_since_midnight(new_start)
    existing_end = existing_begin + duration_minutes
    new_end = new_begin + duration_minutes
    return new_begin < existing_end and new_end > existing_begin


def find_conflicts(
    student_id: uuid.UUID,
    existing: Sequence[ClassSchedule],
    candidate: Sequence[ClassSchedule],
    class_names: Mapping[uuid.UUID, str],
    duration_minutes: int,
) -> list[ScheduleConflict]:
    """One conflict per overlapping (existing, candidate) pair on the same weekday."""
    conflicts = []
    for existing_slot in existing:
        for new_slot in candidate:
            if existing_slot.day_of_week != new_slot.day_of_week:
                continue
            if not slots_overlap(
                existing_slot.start_time, new_slot.start_time, duration_minutes
            ):
                continue
            conflicts.append(
                ScheduleConflict(
                    student_id=student_id,
                    conflicting_class_id=existing_slot.class_id,
                    conflicting_class_name=class_names.get(
                        existing_slot.class_id, "Unknown Class"
                    ),
                    conflict_days=[existing_slot.day_of_week],
                    conflict_times=ConflictTimes(
                        existing_start=existing_slot.start_time,
                        new_start=new_slot.start_time,
                    ),
                )
            )
    return conflicts


async def check_conflicts(
    db: AsyncSession,
    student_id: uuid.UUID,
    candidate_class_id: uuid.UUID,
    duration_minutes: Optional[int] = None,
) -> ConflictCheckResult:
    """Check a prospective class against the student's active enrollments."""
    duration_minutes = (
        duration_minutes or get_settings().CONFLICT_ASSUMED_DURATION_MINUTES
    )

    with store_errors("check current enrollments"):
        result = await db.execute(
            select(Enrollment.class_id, Class.name)
            .join(Class, Class.id == Enrollment.class_id)
            .where(
                Enrollment.student_id == student_id,
                Enrollment.status == EnrollmentStatus.ACTIVE,
            )
        )
        enrollments = result.all()

    if not enrollments:
        return ConflictCheckResult()

    class_names = {class_id: name for class_id, name in enrollments}
    existing = await get_schedules_for_classes(db, class_names.keys())
    candidate = await get_schedules_for_classes(db, [candidate_class_id])

    conflicts = find_conflicts(
        student_id, existing, candidate, class_names, duration_minutes
    )
    if conflicts:
        logger.info(
            "Student %s has %d schedule conflicts with class %s",
            student_id,
            len(conflicts),
            candidate_class_id,
        )
    return ConflictCheckResult(has_conflicts=bool(conflicts), conflicts=conflicts)
