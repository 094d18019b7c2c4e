"""
Unit tests for raw value parsing.
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities import EventKind, EventStatus
from domain.errors import MalformedRecordError
from domain.event_parsing import (
    build_event, parse_kind, parse_leave_days, parse_status, parse_timestamp
)


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_utc_suffix_keeps_wall_clock(self):
        ts = parse_timestamp("2025-02-03T23:30:00Z")

        assert ts == datetime(2025, 2, 3, 23, 30)
        assert ts.tzinfo is None

    def test_offset_dropped_not_converted(self):
        ts = parse_timestamp("2025-02-28T23:45:00+06:00")

        # stays on the 28th; no shift into March
        assert ts == datetime(2025, 2, 28, 23, 45)

    def test_aware_datetime(self):
        aware = datetime(2025, 2, 3, 9, 0, tzinfo=timezone(timedelta(hours=6)))

        assert parse_timestamp(aware) == datetime(2025, 2, 3, 9, 0)

    def test_milliseconds(self):
        assert parse_timestamp("2025-02-03T09:05:00.000Z") == datetime(2025, 2, 3, 9, 5)

    def test_date_cell(self):
        assert parse_timestamp(date(2025, 2, 3)) == datetime(2025, 2, 3)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42])
    def test_invalid(self, value):
        with pytest.raises(MalformedRecordError):
            parse_timestamp(value)


class TestKindAndStatus:
    """Tests for parse_kind and parse_status."""

    @pytest.mark.parametrize("value,kind", [
        ("In", EventKind.CHECK_IN),
        ("CheckIn", EventKind.CHECK_IN),
        (" check-out ", EventKind.CHECK_OUT),
        ("OUT", EventKind.CHECK_OUT),
    ])
    def test_kind_aliases(self, value, kind):
        assert parse_kind(value) == kind

    def test_unknown_kind(self):
        with pytest.raises(MalformedRecordError):
            parse_kind("lunch")

    def test_status_depends_on_kind(self):
        assert parse_status("Late", EventKind.CHECK_IN) == EventStatus.LATE
        assert parse_status("Late", EventKind.CHECK_OUT) == EventStatus.NORMAL
        assert parse_status("Overtime", EventKind.CHECK_OUT) == EventStatus.OVERTIME
        assert parse_status(None, EventKind.CHECK_IN) == EventStatus.ON_TIME

    def test_build_event(self):
        event = build_event("u1", "2025-02-03T19:30:00", EventKind.CHECK_OUT, "Overtime")

        assert event.user_id == "u1"
        assert event.timestamp == datetime(2025, 2, 3, 19, 30)
        assert event.status == EventStatus.OVERTIME


class TestParseLeaveDays:
    """Tests for parse_leave_days."""

    @pytest.mark.parametrize("value,expected", [(None, 0), ("", 0), (2, 2), ("3", 3), (1.0, 1)])
    def test_valid(self, value, expected):
        assert parse_leave_days(value, "u1") == expected

    @pytest.mark.parametrize("value", ["two", -1, 1.5, True, float("nan"), float("inf")])
    def test_invalid(self, value):
        with pytest.raises(MalformedRecordError):
            parse_leave_days(value, "u1")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
