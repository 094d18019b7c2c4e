"""
Unit tests for DailyGridBuilder.
"""

import pytest
from datetime import date, datetime
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.daily_grid import DailyGridBuilder, index_by_date
from domain.entities import AttendanceEvent, EventKind, EventStatus
from domain.month_key import MonthKey


def check_in(ts, status=EventStatus.ON_TIME):
    return AttendanceEvent("u1", ts, EventKind.CHECK_IN, status)


def check_out(ts, status=EventStatus.NORMAL):
    return AttendanceEvent("u1", ts, EventKind.CHECK_OUT, status)


class TestIndexByDate:
    """Tests for index_by_date."""

    def test_first_event_in_input_order_wins(self):
        later = check_in(datetime(2025, 4, 3, 18, 0))
        earlier = check_in(datetime(2025, 4, 3, 8, 0))

        index = index_by_date([later, earlier])

        assert index[date(2025, 4, 3)] is later

    def test_one_entry_per_date(self):
        events = [
            check_in(datetime(2025, 4, 1, 9, 0)),
            check_in(datetime(2025, 4, 1, 9, 5)),
            check_in(datetime(2025, 4, 2, 9, 0)),
        ]
        assert len(index_by_date(events)) == 2


class TestDailyGridBuilder:
    """Tests for DailyGridBuilder.build."""

    def test_single_check_in_in_thirty_day_month(self):
        month = MonthKey(2025, 4)
        builder = DailyGridBuilder()

        row = builder.build(month, [check_in(datetime(2025, 4, 15, 9, 7))], [])

        assert row.days_in_month == 30
        assert sorted(row.slots) == list(range(1, 31))
        assert row.slot(15).check_in == "09:07 AM"
        assert row.slot(15).check_out == ""
        for day in range(1, 31):
            if day != 15:
                assert row.slot(day).check_in == ""
                assert row.slot(day).check_out == ""

    def test_check_in_and_out_same_day(self):
        month = MonthKey(2025, 2)
        builder = DailyGridBuilder()

        row = builder.build(
            month,
            [check_in(datetime(2025, 2, 3, 8, 55))],
            [check_out(datetime(2025, 2, 3, 19, 30), EventStatus.OVERTIME)],
        )

        assert len(row.slots) == 28
        assert row.slot(3).check_in == "08:55 AM"
        assert row.slot(3).check_out == "07:30 PM"

    def test_duplicate_same_day_keeps_first(self):
        month = MonthKey(2025, 2)
        builder = DailyGridBuilder()

        row = builder.build(
            month,
            [check_in(datetime(2025, 2, 10, 10, 0)), check_in(datetime(2025, 2, 10, 9, 0))],
            [],
        )

        assert row.slot(10).check_in == "10:00 AM"

    def test_events_outside_month_ignored(self):
        month = MonthKey(2025, 2)
        builder = DailyGridBuilder()

        row = builder.build(month, [check_in(datetime(2025, 3, 1, 9, 0))], [])

        assert all(slot.check_in == "" for slot in row.slots.values())

    def test_custom_time_format(self):
        builder = DailyGridBuilder(time_format="%H:%M")
        row = builder.build(MonthKey(2024, 2), [check_in(datetime(2024, 2, 29, 14, 5))], [])

        assert len(row.slots) == 29
        assert row.slot(29).check_in == "14:05"

    def test_empty_inputs(self):
        row = DailyGridBuilder().build(MonthKey(2025, 1), [], [])

        assert len(row.slots) == 31
        assert all(slot.check_in == "" and slot.check_out == "" for slot in row.slots.values())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
