"""
Unit tests for PdfWriter summary report generation.
"""

import pytest
from pathlib import Path
import tempfile

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities import MonthlySummaryReport, MonthlySummaryRow, UserMonthlySummary, UserRef
from domain.month_key import MonthKey
from infrastructure.pdf_writer import PdfWriter, SummaryPdf, FALLBACK_FONT


FEB = MonthKey(2025, 2)


def make_row(idx, error=""):
    user = UserRef(id=str(idx), name=f"User {idx}", phone=f"0170000{idx:04d}", role="staff", zone="RL")
    if error:
        return MonthlySummaryRow(user, error=error)
    summary = UserMonthlySummary(
        total_check_ins=20, late_check_ins=2, late_check_outs=1, approved_leaves=0,
        holidays=4, absent=4, extra_days=0, late_adjustment=1
    )
    return MonthlySummaryRow(user, summary)


class TestPdfWriter:
    """Tests for PdfWriter class."""

    def test_create_report_empty(self):
        """Empty report returns None and writes nothing."""
        writer = PdfWriter()

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "test.pdf"

            result = writer.create_summary_report(MonthlySummaryReport(FEB, 24, []), output_path)

            assert result is None
            assert not output_path.exists()

    def test_create_report_writes_file(self):
        """A report with rows produces a PDF file."""
        writer = PdfWriter()
        report = MonthlySummaryReport(FEB, 24, [make_row(1), make_row(2, error="timed out")])

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "nested" / "test.pdf"

            result = writer.create_summary_report(report, output_path)

            assert result == output_path
            assert output_path.exists()
            assert output_path.read_bytes().startswith(b"%PDF")

    def test_many_rows_span_pages(self):
        """Rows past the first page do not fail."""
        writer = PdfWriter()
        report = MonthlySummaryReport(FEB, None, [make_row(i) for i in range(80)])

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "long.pdf"
            assert writer.create_summary_report(report, output_path) == output_path

    def test_columns_fit_page(self):
        """Column widths fit inside A3 landscape with margins."""
        total = sum(width for _, width in PdfWriter.COLUMNS)
        assert total <= 420 - 2 * PdfWriter.MARGIN
        assert len(PdfWriter.COLUMNS) == 14


class TestSummaryPdf:
    """Tests for the SummaryPdf font handling."""

    def test_fallback_font(self):
        pdf = SummaryPdf(title="Test")
        assert pdf.font_family_name == FALLBACK_FONT

    def test_missing_custom_font_falls_back(self):
        pdf = SummaryPdf(title="Test", custom_font_path="/nonexistent/font.ttf")
        assert pdf.font_family_name == FALLBACK_FONT

    def test_safe_text_replaces_non_latin(self):
        pdf = SummaryPdf(title="Test")
        assert pdf.safe_text("Café") == "Café"
        assert pdf.safe_text("রহিম") == "????"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
