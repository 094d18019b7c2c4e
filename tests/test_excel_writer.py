"""
Unit tests for ExcelWriter summary and detailed sheets.
"""

import pytest
import tempfile
from datetime import datetime
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from openpyxl import load_workbook

from domain.daily_grid import DailyGridBuilder
from domain.entities import (
    AttendanceEvent, DailyGridReport, DailyGridRow, EventKind, EventStatus,
    MonthlySummaryReport, MonthlySummaryRow, UserMonthlySummary, UserRef
)
from domain.month_key import MonthKey
from infrastructure.excel_writer import (
    ExcelWriter, GRID_FIXED_HEADERS, SUMMARY_HEADERS, format_filename
)


FEB = MonthKey(2025, 2)
RAHIM = UserRef(id="1", name="Rahim", phone="01700000001", role="staff", group="WH", zone="RL", outlet="Gulshan")
MINA = UserRef(id="2", name="Mina", phone="01700000002", role="staff", group="WH", zone="RL", outlet="Banani")


def full_summary(**overrides):
    values = dict(
        total_check_ins=26, late_check_ins=3, late_check_outs=2, approved_leaves=1,
        holidays=2, absent=0, extra_days=2, late_adjustment=1
    )
    values.update(overrides)
    return UserMonthlySummary(**values)


def is_red(cell):
    return str(cell.fill.start_color.rgb).endswith("FF6B6B")


def is_yellow(cell):
    return str(cell.fill.start_color.rgb).endswith("FFD700")


class TestSummarySheet:
    """Tests for create_summary_report."""

    def test_headers_and_values(self):
        report = MonthlySummaryReport(FEB, 24, [MonthlySummaryRow(RAHIM, full_summary())])

        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_summary_report(report, Path(tmpdir) / "out" / "summary.xlsx")
            ws = load_workbook(path).active

            assert ws.title == "Monthly Report"
            assert [ws.cell(1, c).value for c in range(1, len(SUMMARY_HEADERS) + 1)] == SUMMARY_HEADERS
            row = [ws.cell(2, c).value for c in range(1, len(SUMMARY_HEADERS) + 1)]
            assert row[:5] == ["Rahim", "01700000001", "staff", "RL", 24]
            assert row[5:13] == [2, 1, 0, 2, 26, 3, 2, 1]
            assert not row[13]

    def test_unknown_values_left_blank(self):
        summary = full_summary(holidays=None, absent=None, extra_days=None)
        report = MonthlySummaryReport(FEB, None, [MonthlySummaryRow(RAHIM, summary)])

        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_summary_report(report, Path(tmpdir) / "summary.xlsx")
            ws = load_workbook(path).active

            assert ws.cell(2, 5).value is None   # Total Working Days
            assert ws.cell(2, 6).value is None   # Holidays
            assert ws.cell(2, 8).value is None   # Absent
            assert ws.cell(2, 9).value is None   # Extra Day
            assert ws.cell(2, 10).value == 26
            assert ws.cell(2, 14).value == "Working days not configured"
            assert is_yellow(ws.cell(2, 14))

    def test_failed_row_marked(self):
        report = MonthlySummaryReport(FEB, 24, [
            MonthlySummaryRow(RAHIM, full_summary()),
            MonthlySummaryRow(MINA, error="Failed to fetch check-ins for user 2"),
        ])

        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_summary_report(report, Path(tmpdir) / "summary.xlsx")
            ws = load_workbook(path).active

            assert ws.cell(3, 1).value == "Mina"
            assert all(ws.cell(3, c).value is None for c in range(6, 14))
            assert ws.cell(3, 14).value == "Fetch failed: Failed to fetch check-ins for user 2"
            assert is_red(ws.cell(3, 14))
            assert not is_red(ws.cell(2, 14))

    def test_negative_holidays_highlighted(self):
        report = MonthlySummaryReport(FEB, 31, [MonthlySummaryRow(RAHIM, full_summary(holidays=-3))])

        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_summary_report(report, Path(tmpdir) / "summary.xlsx")
            ws = load_workbook(path).active

            assert ws.cell(2, 6).value == -3
            assert is_yellow(ws.cell(2, 6))

    def test_empty_report_has_headers_only(self):
        report = MonthlySummaryReport(FEB, 24, [])

        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_summary_report(report, Path(tmpdir) / "summary.xlsx")
            ws = load_workbook(path).active

            assert ws.max_row == 1


class TestDailyGridSheet:
    """Tests for create_daily_grid_report."""

    def make_report(self):
        grid = DailyGridBuilder().build(
            FEB,
            [AttendanceEvent("1", datetime(2025, 2, 3, 9, 5), EventKind.CHECK_IN, EventStatus.ON_TIME)],
            [AttendanceEvent("1", datetime(2025, 2, 3, 19, 30), EventKind.CHECK_OUT, EventStatus.OVERTIME)],
        )
        return DailyGridReport(FEB, 24, [
            DailyGridRow(RAHIM, grid=grid),
            DailyGridRow(MINA, error="timed out"),
        ])

    def test_two_header_rows(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_daily_grid_report(self.make_report(), Path(tmpdir) / "daily.xlsx")
            ws = load_workbook(path).active
            merged = {str(r) for r in ws.merged_cells.ranges}

            assert ws.title == "Detailed Summary"
            assert [ws.cell(1, c).value for c in range(1, 5)] == GRID_FIXED_HEADERS
            assert {"A1:A2", "B1:B2", "C1:C2", "D1:D2"} <= merged

            # Day 1 over E:F, day 28 over the last pair
            assert ws.cell(1, 5).value == 1
            assert "E1:F1" in merged
            assert ws.cell(2, 5).value == "In"
            assert ws.cell(2, 6).value == "Out"
            last_in_col = 5 + 27 * 2
            assert ws.cell(1, last_in_col).value == 28
            assert ws.cell(2, last_in_col + 1).value == "Out"
            assert ws.max_column == last_in_col + 1

    def test_slot_values(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_daily_grid_report(self.make_report(), Path(tmpdir) / "daily.xlsx")
            ws = load_workbook(path).active

            assert [ws.cell(3, c).value for c in range(1, 5)] == ["Rahim", "01700000001", "Gulshan", "RL"]
            day3_in = 5 + 2 * 2
            assert ws.cell(3, day3_in).value == "09:05 AM"
            assert ws.cell(3, day3_in + 1).value == "07:30 PM"
            assert not ws.cell(3, 5).value

    def test_failed_row_marked(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = ExcelWriter().create_daily_grid_report(self.make_report(), Path(tmpdir) / "daily.xlsx")
            ws = load_workbook(path).active

            assert ws.cell(4, 1).value == "Mina"
            assert ws.cell(4, 5).value == "Fetch failed: timed out"
            assert is_red(ws.cell(4, 5))


class TestFormatFilename:
    """Tests for format_filename."""

    def test_month_key_placeholder(self):
        assert format_filename("Monthly_Report_{month_key}.xlsx", FEB) == "Monthly_Report_2025-02.xlsx"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
