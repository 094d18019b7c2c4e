"""
PDF Writer Module

Generates a PDF rendition of the monthly summary report using fpdf2.
Mirrors the Excel summary sheet: same columns, same red/yellow marking.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from fpdf import FPDF

from domain.entities import MonthlySummaryReport, MonthlySummaryRow
from infrastructure.logger import get_logger

logger = get_logger("PdfWriter")

FALLBACK_FONT = "Helvetica"


# ==============================================================================
# SummaryPdf Class (A3 Landscape)
# ==============================================================================
class SummaryPdf(FPDF):
    """
    Custom FPDF class with optional TrueType font for A3 landscape reports.
    """

    _font_family: str = FALLBACK_FONT
    _font_loaded: bool = False

    def __init__(self, title: str = "", custom_font_path: Optional[str] = None):
        # A3 Landscape: 420mm x 297mm
        super().__init__(orientation='L', unit='mm', format='A3')
        self.title_text = title
        self._setup_font(custom_font_path)

    def _setup_font(self, custom_font_path: Optional[str] = None) -> None:
        """Load a custom Unicode font if one is configured."""
        if not custom_font_path:
            return

        font_path = Path(custom_font_path)
        if not font_path.exists():
            logger.warning(f"Custom font not found: {font_path}")
            return

        try:
            self.add_font("ReportFont", "", str(font_path))
            self._font_family = "ReportFont"
            self._font_loaded = True
            logger.info(f"Loaded font: {font_path.name}")
        except Exception as e:
            logger.warning(f"Cannot load font {font_path}: {e}")

    @property
    def font_family_name(self) -> str:
        return self._font_family

    def safe_text(self, text: str) -> str:
        """Core fonts only cover latin-1; replace anything else."""
        if self._font_loaded:
            return text
        return text.encode('latin-1', 'replace').decode('latin-1')

    def header(self) -> None:
        """Draw page header with centered title."""
        self.set_font(self._font_family, '', 14)
        self.cell(0, 10, self.safe_text(self.title_text), align='C', new_x='LMARGIN', new_y='NEXT')
        self.ln(3)

    def footer(self) -> None:
        """Draw page footer with page number."""
        self.set_y(-12)
        self.set_font(self._font_family, '', 8)
        self.cell(0, 10, f'Page {self.page_no()}/{{nb}}', align='C')


# ==============================================================================
# PdfWriter Class
# ==============================================================================
class PdfWriter:
    """
    Generates the monthly summary PDF.

    Features:
    - A3 Landscape to fit all summary columns
    - Header row repeated on every page
    - Failed rows filled red, unconfigured-month remarks filled yellow
    """

    COLORS: Dict[str, Tuple[int, int, int]] = {
        'red': (255, 107, 107),
        'yellow': (255, 215, 0),
        'header': (68, 114, 196),
        'white': (255, 255, 255),
    }

    # (header, width in mm)
    COLUMNS: List[Tuple[str, float]] = [
        ("Name", 48),
        ("Number", 28),
        ("Role", 26),
        ("Zone", 30),
        ("Working Days", 20),
        ("Holidays", 20),
        ("Approved Leave", 20),
        ("Absent", 18),
        ("Extra Day", 18),
        ("Check-Ins", 20),
        ("Late In", 18),
        ("Late Out", 18),
        ("Late Adj.", 18),
        ("Remarks", 102),
    ]

    MARGIN = 8
    HEADER_ROW_HEIGHT = 12
    DATA_ROW_HEIGHT = 7
    PAGE_HEIGHT = 297
    BOTTOM_RESERVED = 16

    def __init__(self, custom_font_path: Optional[str] = None):
        self._custom_font_path = custom_font_path

    def create_summary_report(self, report: MonthlySummaryReport, output_path: Path) -> Optional[Path]:
        """
        Create the summary PDF.

        Returns:
            Path to the created file, or None for an empty report
        """
        if not report.rows:
            logger.info("Empty report, PDF not written")
            return None

        title = f"Monthly Attendance Report {report.month_key}"
        pdf = SummaryPdf(title=title, custom_font_path=self._custom_font_path)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(self.MARGIN, self.MARGIN, self.MARGIN)

        pdf.add_page()
        self._draw_header_row(pdf)

        for row in report.rows:
            if pdf.get_y() + self.DATA_ROW_HEIGHT > self.PAGE_HEIGHT - self.BOTTOM_RESERVED:
                pdf.add_page()
                self._draw_header_row(pdf)
            self._draw_data_row(pdf, row, report.working_days)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        logger.info(f"PDF report saved: {output_path}")
        return output_path

    def _draw_header_row(self, pdf: SummaryPdf) -> None:
        pdf.set_font(pdf.font_family_name, '', 9)
        pdf.set_fill_color(*self.COLORS['header'])
        pdf.set_text_color(255, 255, 255)

        x = self.MARGIN
        y = pdf.get_y()
        for header, width in self.COLUMNS:
            pdf.set_xy(x, y)
            pdf.cell(width, self.HEADER_ROW_HEIGHT, header, border=1, align='C', fill=True)
            x += width

        pdf.set_xy(self.MARGIN, y + self.HEADER_ROW_HEIGHT)
        pdf.set_text_color(0, 0, 0)

    def _row_values(self, row: MonthlySummaryRow, working_days: Optional[int]) -> List[str]:
        user = row.user
        values = [user.name, user.phone, user.role, user.zone, _text(working_days)]
        if not row.ok:
            return values + [""] * 8 + [f"Fetch failed: {row.error}"]

        s = row.summary
        return values + [
            _text(s.holidays),
            _text(s.approved_leaves),
            _text(s.absent),
            _text(s.extra_days),
            _text(s.total_check_ins),
            _text(s.late_check_ins),
            _text(s.late_check_outs),
            _text(s.late_adjustment),
            "Working days not configured" if s.is_degraded else "",
        ]

    def _draw_data_row(self, pdf: SummaryPdf, row: MonthlySummaryRow, working_days: Optional[int]) -> None:
        pdf.set_font(pdf.font_family_name, '', 9)
        values = self._row_values(row, working_days)
        last = len(self.COLUMNS) - 1

        x = self.MARGIN
        y = pdf.get_y()
        for idx, ((_, width), value) in enumerate(zip(self.COLUMNS, values)):
            fill = None
            if not row.ok:
                fill = self.COLORS['red']
            elif idx == last and row.summary.is_degraded:
                fill = self.COLORS['yellow']

            if fill:
                pdf.set_fill_color(*fill)
            pdf.set_xy(x, y)
            pdf.cell(
                width, self.DATA_ROW_HEIGHT, pdf.safe_text(value),
                border=1, align='L' if idx in (0, last) else 'C', fill=fill is not None
            )
            x += width

        pdf.set_xy(self.MARGIN, y + self.DATA_ROW_HEIGHT)


def _text(value) -> str:
    """Blank for unknown values."""
    return "" if value is None else str(value)
