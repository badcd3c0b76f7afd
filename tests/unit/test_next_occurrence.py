"""Unit tests for next-occurrence resolution from weekly slots."""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from services.classes_service.models import DayOfWeek
from services.classes_service.services.next_session import (
    days_until,
    resolve_next_occurrence,
)
from tests.factories import ClassScheduleFactory

VANCOUVER = ZoneInfo("America/Vancouver")

# 2026-10-19 is a Monday
MONDAY_NOON = datetime(2026, 10, 19, 12, 0, tzinfo=VANCOUVER)


def _slot(day: DayOfWeek, at: time):
    return ClassScheduleFactory.create(day_of_week=day, start_time=at)


class TestDaysUntil:
    def test_later_today_is_zero_days(self):
        assert days_until(_slot(DayOfWeek.MONDAY, time(18, 0)), MONDAY_NOON) == 0

    def test_exact_start_today_rolls_to_next_week(self):
        as_of = datetime(2026, 10, 19, 18, 0, tzinfo=VANCOUVER)
        assert days_until(_slot(DayOfWeek.MONDAY, time(18, 0)), as_of) == 7

    def test_already_started_today_rolls_to_next_week(self):
        as_of = datetime(2026, 10, 19, 19, 30, tzinfo=VANCOUVER)
        assert days_until(_slot(DayOfWeek.MONDAY, time(18, 0)), as_of) == 7

    def test_sunday_from_monday(self):
        assert days_until(_slot(DayOfWeek.SUNDAY, time(9, 0)), MONDAY_NOON) == 6


class TestResolveNextOccurrence:
    def test_no_slots_returns_none(self):
        assert resolve_next_occurrence([], MONDAY_NOON) is None

    def test_picks_soonest_day(self):
        slots = [
            _slot(DayOfWeek.WEDNESDAY, time(10, 0)),
            _slot(DayOfWeek.TUESDAY, time(20, 0)),
        ]
        result = resolve_next_occurrence(slots, MONDAY_NOON)

        assert result.session_date == date(2026, 10, 20)
        assert result.start_time == time(20, 0)
        assert result.is_virtual is True
        assert result.id is None

    def test_same_day_tie_goes_to_earliest_start(self):
        slots = [
            _slot(DayOfWeek.WEDNESDAY, time(18, 0)),
            _slot(DayOfWeek.WEDNESDAY, time(9, 0)),
        ]
        result = resolve_next_occurrence(slots, MONDAY_NOON)

        assert result.session_date == date(2026, 10, 21)
        assert result.start_time == time(9, 0)

    def test_exact_duplicates_resolve_to_first_row(self):
        first = _slot(DayOfWeek.THURSDAY, time(17, 0))
        second = _slot(DayOfWeek.THURSDAY, time(17, 0))
        result = resolve_next_occurrence([first, second], MONDAY_NOON)

        assert result.session_date == date(2026, 10, 22)
        assert result.start_time == time(17, 0)

    def test_started_slot_today_resolves_a_week_out(self):
        as_of = datetime(2026, 10, 19, 18, 0, tzinfo=VANCOUVER)
        result = resolve_next_occurrence([_slot(DayOfWeek.MONDAY, time(18, 0))], as_of)

        assert result.session_date == date(2026, 10, 26)

    def test_end_time_uses_duration(self):
        result = resolve_next_occurrence(
            [_slot(DayOfWeek.MONDAY, time(18, 0))], MONDAY_NOON, duration_minutes=45
        )
        assert result.end_time == time(18, 45)

    def test_end_time_equals_start_without_duration(self):
        result = resolve_next_occurrence(
            [_slot(DayOfWeek.MONDAY, time(18, 0))], MONDAY_NOON
        )
        assert result.end_time == result.start_time

    def test_fewer_days_beats_earlier_time_of_day(self):
        slots = [
            _slot(DayOfWeek.MONDAY, time(18, 0)),
            _slot(DayOfWeek.WEDNESDAY, time(9, 0)),
        ]
        tuesday = datetime(2026, 10, 20, 8, 0, tzinfo=VANCOUVER)

        result = resolve_next_occurrence(slots, tuesday)

        assert result.session_date == date(2026, 10, 21)
        assert result.start_time == time(9, 0)
