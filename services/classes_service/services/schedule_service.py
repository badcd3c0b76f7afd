"""Weekly recurrence slots (class_schedules) for a class."""

import uuid
from datetime import time
from typing import Iterable, Sequence

from libs.common.logging import get_logger
from services.classes_service.errors import NotFoundError, store_errors
from services.classes_service.models import ClassSchedule, DayOfWeek
from services.classes_service.schemas import ScheduleSlot
from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def schedule_sort_key(schedule) -> tuple[int, time]:
    """Order slots Monday..Sunday, then by start time."""
    return DayOfWeek(schedule.day_of_week).weekday, schedule.start_time


async def create_schedule(
    db: AsyncSession,
    class_id: uuid.UUID,
    day_of_week: DayOfWeek,
    start_time: time,
) -> ClassSchedule:
    """Insert one slot. Overlap with other classes is checked by the caller."""
    schedule = ClassSchedule(
        class_id=class_id, day_of_week=day_of_week, start_time=start_time
    )
    with store_errors("create class schedule"):
        db.add(schedule)
        await db.commit()
        await db.refresh(schedule)
    return schedule


async def get_schedules(db: AsyncSession, class_id: uuid.UUID) -> list[ClassSchedule]:
    with store_errors("fetch class schedules"):
        result = await db.execute(
            select(ClassSchedule).where(ClassSchedule.class_id == class_id)
        )
        schedules = result.scalars().all()
    return sorted(schedules, key=schedule_sort_key)


async def get_schedules_for_classes(
    db: AsyncSession, class_ids: Iterable[uuid.UUID]
) -> Sequence[ClassSchedule]:
    class_ids = list(class_ids)
    if not class_ids:
        return []
    with store_errors("fetch class schedules"):
        result = await db.execute(
            select(ClassSchedule).where(ClassSchedule.class_id.in_(class_ids))
        )
        return result.scalars().all()


async def replace_schedules(
    db: AsyncSession,
    class_id: uuid.UUID,
    schedules: Sequence[ScheduleSlot],
) -> list[ClassSchedule]:
    """Replace every slot of a class: delete all, then insert the new set.

    Both statements share one transaction, so readers never observe the
    class with zero slots and a failed insert leaves the old set in place.
    """
    try:
        with store_errors("delete existing schedules"):
            await db.execute(
                delete(ClassSchedule).where(ClassSchedule.class_id == class_id)
            )

        if schedules:
            with store_errors("create new schedules"):
                await db.execute(
                    insert(ClassSchedule),
                    [
                        {
                            "id": uuid.uuid4(),
                            "class_id": class_id,
                            "day_of_week": slot.day_of_week,
                            "start_time": slot.start_time,
                        }
                        for slot in schedules
                    ],
                )

        with store_errors("replace class schedules"):
            await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Replaced schedules for class %s (%d slots)", class_id, len(schedules))
    return await get_schedules(db, class_id)


async def delete_schedule(
    db: AsyncSession, class_id: uuid.UUID, schedule_id: uuid.UUID
) -> None:
    """Delete one slot of a class; a slot owned by another class is not found."""
    with store_errors("delete class schedule"):
        result = await db.execute(
            delete(ClassSchedule).where(
                ClassSchedule.id == schedule_id,
                ClassSchedule.class_id == class_id,
            )
        )
        await db.commit()
    if result.rowcount == 0:
        raise NotFoundError(f"Schedule {schedule_id} not found for class {class_id}")
