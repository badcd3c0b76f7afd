"""Integration tests for calendar and weekly projections."""

from datetime import date, time

import pytest
import pytest_asyncio
from services.classes_service.models import EnrollmentStatus
from services.classes_service.services.calendar import (
    get_calendar_events,
    get_weekly_schedule,
)
from tests.factories import (
    ClassFactory,
    ClassSessionFactory,
    EnrollmentFactory,
    ProgramFactory,
)

WEEK_START = date(2026, 10, 19)


@pytest_asyncio.fixture
async def two_classes(db_session):
    program = ProgramFactory.create(name="Adult Karate")
    kata = ClassFactory.create(program_id=program.id, name="Kata", max_capacity=15)
    sparring = ClassFactory.create(program_id=program.id, name="Sparring")
    sessions = [
        ClassSessionFactory.create(
            class_id=sparring.id, session_date=date(2026, 10, 21), start_time=time(19, 0)
        ),
        ClassSessionFactory.create(
            class_id=kata.id, session_date=date(2026, 10, 19), start_time=time(18, 0)
        ),
        ClassSessionFactory.create(
            class_id=kata.id, session_date=date(2026, 10, 21), start_time=time(17, 0)
        ),
        # Outside the week
        ClassSessionFactory.create(class_id=kata.id, session_date=date(2026, 10, 26)),
    ]
    enrollments = [
        EnrollmentFactory.create(class_id=kata.id),
        EnrollmentFactory.create(class_id=kata.id),
        EnrollmentFactory.create(class_id=kata.id, status=EnrollmentStatus.WAITLIST),
    ]
    db_session.add_all([program, kata, sparring, *sessions, *enrollments])
    await db_session.commit()
    return kata, sparring


@pytest.mark.asyncio
@pytest.mark.integration
async def test_calendar_events_in_range_are_ordered(db_session, two_classes):
    kata, sparring = two_classes

    events = await get_calendar_events(db_session, WEEK_START, date(2026, 10, 25))

    assert [(e.title, e.start.date(), e.start.time()) for e in events] == [
        ("Kata", date(2026, 10, 19), time(18, 0)),
        ("Kata", date(2026, 10, 21), time(17, 0)),
        ("Sparring", date(2026, 10, 21), time(19, 0)),
    ]
    kata_event = events[0]
    assert kata_event.program_name == "Adult Karate"
    assert kata_event.max_capacity == 15
    assert kata_event.enrollment_count == 2
    assert events[2].enrollment_count == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_calendar_events_filtered_by_class(db_session, two_classes):
    _, sparring = two_classes

    events = await get_calendar_events(
        db_session, WEEK_START, date(2026, 10, 25), class_ids=[sparring.id]
    )

    assert [e.class_id for e in events] == [sparring.id]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_weekly_schedule_groups_by_weekday(db_session, two_classes):
    weekly = await get_weekly_schedule(db_session, WEEK_START)

    assert [e.title for e in weekly.monday] == ["Kata"]
    assert [e.title for e in weekly.wednesday] == ["Kata", "Sparring"]
    assert weekly.tuesday == []
    assert weekly.sunday == []
