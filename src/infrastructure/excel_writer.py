"""
Excel Writer Module

Generates formatted Excel workbooks from assembled reports.
Pure formatting: every figure is taken from the report as computed.
"""

from pathlib import Path
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from domain.entities import DailyGridReport, MonthlySummaryReport
from infrastructure.logger import get_logger

logger = get_logger("ExcelWriter")


SUMMARY_HEADERS = [
    "Name",
    "Number",
    "Role",
    "Zone",
    "Total Working Days",
    "Holidays",
    "Approved Leave",
    "Absent",
    "Extra Day",
    "Total Check-Ins",
    "Late Check-Ins (9.15 AM)",
    "Late Check-Outs (7.00 PM)",
    "Late Adjustment",
    "Remarks",
]

GRID_FIXED_HEADERS = ["Name", "Number", "Outlet", "Zone"]


class ExcelWriter:
    """
    Generates formatted Excel report workbooks.

    Summary sheet:
    - Row 1: headers
    - One row per roster member; unknown values (unconfigured month) left blank
    - Failed rows filled red with the error in Remarks

    Detailed sheet:
    - Row 1: Name | Number | Outlet | Zone | day numbers merged over two columns
    - Row 2: In | Out sub-headers per day
    - One row per roster member
    """

    COLORS = {
        'red': PatternFill(start_color='FF6B6B', end_color='FF6B6B', fill_type='solid'),
        'yellow': PatternFill(start_color='FFD700', end_color='FFD700', fill_type='solid'),
        'header': PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid'),
    }

    BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    # Thicker line between day column pairs
    THICK_SIDE = Side(style='medium')
    THIN_SIDE = Side(style='thin')

    def __init__(self):
        self.wb: Optional[Workbook] = None

    def _write_header_cell(self, ws, row: int, col: int, value):
        cell = ws.cell(row, col, value)
        cell.font = Font(bold=True, color='FFFFFF')
        cell.fill = self.COLORS['header']
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
        cell.border = self.BORDER
        return cell

    def _write_cell(self, ws, row: int, col: int, value, align: str = 'center'):
        cell = ws.cell(row, col, value)
        cell.alignment = Alignment(horizontal=align, vertical='center')
        cell.border = self.BORDER
        return cell

    def _new_workbook(self, title: str):
        self.wb = Workbook()
        ws = self.wb.active
        ws.title = title
        return ws

    def _save(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(output_path)
        logger.info(f"Excel report saved: {output_path}")
        return output_path

    def create_summary_report(self, report: MonthlySummaryReport, output_path: Path) -> Path:
        """
        Create the monthly summary workbook.

        Args:
            report: The assembled monthly summary report
            output_path: Path to save the Excel file

        Returns:
            Path to the created file
        """
        ws = self._new_workbook("Monthly Report")

        for col, header in enumerate(SUMMARY_HEADERS, start=1):
            self._write_header_cell(ws, 1, col, header)

        remarks_col = len(SUMMARY_HEADERS)

        for row_idx, row in enumerate(report.rows, start=2):
            user = row.user
            values: List = [user.name, user.phone, user.role, user.zone, report.working_days]

            if row.ok:
                s = row.summary
                values += [
                    s.holidays,
                    s.approved_leaves,
                    s.absent,
                    s.extra_days,
                    s.total_check_ins,
                    s.late_check_ins,
                    s.late_check_outs,
                    s.late_adjustment,
                    "" if not s.is_degraded else "Working days not configured",
                ]
            else:
                values += [None] * 8 + [f"Fetch failed: {row.error}"]

            for col, value in enumerate(values, start=1):
                align = 'left' if col in (1, remarks_col) else 'center'
                cell = self._write_cell(ws, row_idx, col, value, align=align)
                if not row.ok:
                    cell.fill = self.COLORS['red']
                elif row.summary.is_degraded and col == remarks_col:
                    cell.fill = self.COLORS['yellow']
                elif col == 6 and isinstance(value, int) and value < 0:
                    # negative holidays point at a misconfigured calendar
                    cell.fill = self.COLORS['yellow']

        ws.column_dimensions['A'].width = 24
        for col in range(2, remarks_col):
            ws.column_dimensions[get_column_letter(col)].width = 14
        ws.column_dimensions[get_column_letter(remarks_col)].width = 36
        ws.row_dimensions[1].height = 32
        ws.freeze_panes = 'B2'

        return self._save(output_path)

    def create_daily_grid_report(self, report: DailyGridReport, output_path: Path) -> Path:
        """
        Create the detailed (day-by-day) workbook.

        Args:
            report: The assembled daily grid report
            output_path: Path to save the Excel file

        Returns:
            Path to the created file
        """
        ws = self._new_workbook("Detailed Summary")
        num_days = report.days_in_month
        first_day_col = len(GRID_FIXED_HEADERS) + 1

        # Fixed headers span both header rows
        for col, header in enumerate(GRID_FIXED_HEADERS, start=1):
            self._write_header_cell(ws, 1, col, header)
            self._write_header_cell(ws, 2, col, None)
            ws.merge_cells(start_row=1, start_column=col, end_row=2, end_column=col)

        # Day number merged over its In/Out pair
        for day in range(1, num_days + 1):
            in_col = first_day_col + (day - 1) * 2
            out_col = in_col + 1
            self._write_header_cell(ws, 1, in_col, day)
            self._write_header_cell(ws, 1, out_col, None)
            ws.merge_cells(start_row=1, start_column=in_col, end_row=1, end_column=out_col)
            self._write_header_cell(ws, 2, in_col, "In")
            self._write_header_cell(ws, 2, out_col, "Out")

        last_col = first_day_col + num_days * 2 - 1

        for row_idx, row in enumerate(report.rows, start=3):
            user = row.user
            for col, value in enumerate([user.name, user.phone, user.outlet, user.zone], start=1):
                self._write_cell(ws, row_idx, col, value, align='left' if col == 1 else 'center')

            if not row.ok:
                self._write_cell(ws, row_idx, first_day_col, f"Fetch failed: {row.error}", align='left')
                for col in range(first_day_col, last_col + 1):
                    ws.cell(row_idx, col).fill = self.COLORS['red']
                    ws.cell(row_idx, col).border = self.BORDER
                ws.merge_cells(
                    start_row=row_idx, start_column=first_day_col,
                    end_row=row_idx, end_column=last_col
                )
                continue

            for day in range(1, num_days + 1):
                slot = row.grid.slot(day)
                in_col = first_day_col + (day - 1) * 2
                self._write_cell(ws, row_idx, in_col, slot.check_in)
                out_cell = self._write_cell(ws, row_idx, in_col + 1, slot.check_out)
                out_cell.border = Border(
                    left=self.THIN_SIDE, top=self.THIN_SIDE,
                    bottom=self.THIN_SIDE, right=self.THICK_SIDE
                )

        ws.column_dimensions['A'].width = 24
        for col in range(2, first_day_col):
            ws.column_dimensions[get_column_letter(col)].width = 14
        for col in range(first_day_col, last_col + 1):
            ws.column_dimensions[get_column_letter(col)].width = 10
        ws.freeze_panes = ws.cell(3, 2)

        return self._save(output_path)


def format_filename(pattern: str, month_key) -> str:
    """Format filename pattern with the {month_key} placeholder."""
    return pattern.format(month_key=str(month_key))
