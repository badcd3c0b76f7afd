"""Unit tests for weekly slot overlap detection."""

import uuid
from datetime import time

from services.classes_service.models import DayOfWeek
from services.classes_service.services.conflicts import find_conflicts, slots_overlap
from tests.factories import ClassScheduleFactory


class TestSlotsOverlap:
    def test_half_hour_offset_overlaps(self):
        assert slots_overlap(time(18, 0), time(18, 30), 60)

    def test_back_to_back_does_not_overlap(self):
        assert not slots_overlap(time(18, 0), time(19, 0), 60)
        assert not slots_overlap(time(19, 0), time(18, 0), 60)

    def test_identical_start_overlaps(self):
        assert slots_overlap(time(18, 0), time(18, 0), 60)

    def test_new_slot_ending_inside_existing(self):
        assert slots_overlap(time(18, 0), time(17, 30), 60)

    def test_shorter_duration_removes_overlap(self):
        assert not slots_overlap(time(18, 0), time(18, 30), 30)


class TestFindConflicts:
    def setup_method(self):
        self.student_id = uuid.uuid4()
        self.existing_class_id = uuid.uuid4()
        self.candidate_class_id = uuid.uuid4()
        self.class_names = {self.existing_class_id: "Monday Juniors"}

    def test_reports_overlapping_pair(self):
        existing = [
            ClassScheduleFactory.create(
                class_id=self.existing_class_id,
                day_of_week=DayOfWeek.MONDAY,
                start_time=time(18, 0),
            )
        ]
        candidate = [
            ClassScheduleFactory.create(
                class_id=self.candidate_class_id,
                day_of_week=DayOfWeek.MONDAY,
                start_time=time(18, 30),
            )
        ]

        conflicts = find_conflicts(
            self.student_id, existing, candidate, self.class_names, 60
        )

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.student_id == self.student_id
        assert conflict.conflicting_class_id == self.existing_class_id
        assert conflict.conflicting_class_name == "Monday Juniors"
        assert conflict.conflict_days == [DayOfWeek.MONDAY]
        assert conflict.conflict_times.existing_start == time(18, 0)
        assert conflict.conflict_times.new_start == time(18, 30)

    def test_different_days_never_conflict(self):
        existing = [
            ClassScheduleFactory.create(
                class_id=self.existing_class_id,
                day_of_week=DayOfWeek.MONDAY,
                start_time=time(18, 0),
            )
        ]
        candidate = [
            ClassScheduleFactory.create(
                class_id=self.candidate_class_id,
                day_of_week=DayOfWeek.TUESDAY,
                start_time=time(18, 0),
            )
        ]

        assert find_conflicts(self.student_id, existing, candidate, self.class_names, 60) == []

    def test_one_conflict_per_overlapping_pair(self):
        existing = [
            ClassScheduleFactory.create(
                class_id=self.existing_class_id,
                day_of_week=day,
                start_time=time(18, 0),
            )
            for day in (DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY)
        ]
        candidate = [
            ClassScheduleFactory.create(
                class_id=self.candidate_class_id,
                day_of_week=day,
                start_time=time(18, 15),
            )
            for day in (DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY)
        ]

        conflicts = find_conflicts(
            self.student_id, existing, candidate, self.class_names, 60
        )

        assert [c.conflict_days for c in conflicts] == [
            [DayOfWeek.MONDAY],
            [DayOfWeek.WEDNESDAY],
        ]

    def test_unknown_class_name_fallback(self):
        existing = [ClassScheduleFactory.create(start_time=time(18, 0))]
        candidate = [ClassScheduleFactory.create(start_time=time(18, 0))]

        conflicts = find_conflicts(self.student_id, existing, candidate, {}, 60)

        assert conflicts[0].conflicting_class_name == "Unknown Class"

    def test_opposite_direction_finds_same_overlap(self):
        monday_evening = ClassScheduleFactory.create(
            class_id=self.existing_class_id, start_time=time(18, 0)
        )
        monday_later = ClassScheduleFactory.create(
            class_id=self.candidate_class_id, start_time=time(18, 30)
        )

        forward = find_conflicts(
            self.student_id, [monday_evening], [monday_later], {}, 60
        )
        backward = find_conflicts(
            self.student_id, [monday_later], [monday_evening], {}, 60
        )

        assert len(forward) == len(backward) == 1
        assert forward[0].conflict_days == backward[0].conflict_days
