"""Integration tests for enrollment conflict checks."""

import uuid
from datetime import time

import pytest
from services.classes_service.models import DayOfWeek, EnrollmentStatus
from services.classes_service.services.conflicts import check_conflicts
from tests.factories import (
    ClassFactory,
    ClassScheduleFactory,
    EnrollmentFactory,
    ProgramFactory,
)


async def _class_at(db_session, name, day, at):
    program = ProgramFactory.create()
    class_ = ClassFactory.create(program_id=program.id, name=name)
    schedule = ClassScheduleFactory.create(
        class_id=class_.id, day_of_week=day, start_time=at
    )
    db_session.add_all([program, class_, schedule])
    await db_session.commit()
    return class_


@pytest.mark.asyncio
@pytest.mark.integration
async def test_overlapping_class_is_reported(db_session):
    student_id = uuid.uuid4()
    current = await _class_at(db_session, "Monday Juniors", DayOfWeek.MONDAY, time(18, 0))
    candidate = await _class_at(db_session, "Monday Kata", DayOfWeek.MONDAY, time(18, 30))
    db_session.add(EnrollmentFactory.create(class_id=current.id, student_id=student_id))
    await db_session.commit()

    result = await check_conflicts(db_session, student_id, candidate.id)

    assert result.has_conflicts is True
    assert len(result.conflicts) == 1
    assert result.conflicts[0].conflicting_class_id == current.id
    assert result.conflicts[0].conflicting_class_name == "Monday Juniors"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_back_to_back_class_is_not_a_conflict(db_session):
    student_id = uuid.uuid4()
    current = await _class_at(db_session, "Monday Juniors", DayOfWeek.MONDAY, time(18, 0))
    candidate = await _class_at(db_session, "Monday Seniors", DayOfWeek.MONDAY, time(19, 0))
    db_session.add(EnrollmentFactory.create(class_id=current.id, student_id=student_id))
    await db_session.commit()

    result = await check_conflicts(db_session, student_id, candidate.id)

    assert result.has_conflicts is False
    assert result.conflicts == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inactive_enrollments_are_ignored(db_session):
    student_id = uuid.uuid4()
    current = await _class_at(db_session, "Monday Juniors", DayOfWeek.MONDAY, time(18, 0))
    candidate = await _class_at(db_session, "Monday Kata", DayOfWeek.MONDAY, time(18, 0))
    db_session.add(
        EnrollmentFactory.create(
            class_id=current.id,
            student_id=student_id,
            status=EnrollmentStatus.DROPPED,
        )
    )
    await db_session.commit()

    result = await check_conflicts(db_session, student_id, candidate.id)

    assert result.has_conflicts is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_student_without_enrollments_has_no_conflicts(db_session):
    candidate = await _class_at(db_session, "Monday Kata", DayOfWeek.MONDAY, time(18, 0))

    result = await check_conflicts(db_session, uuid.uuid4(), candidate.id)

    assert result.has_conflicts is False
    assert result.conflicts == []
