"""
Command Line Module

Entry point for generating monthly summary and daily grid reports and
for maintaining the working-days calendar.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from application.report_service import AttendanceReportService
from config.config_manager import AppConfig, ConfigManager
from domain.entities import ReportState
from domain.errors import AttendanceError
from domain.daily_grid import DailyGridBuilder
from domain.month_key import MonthKey
from infrastructure.logger import get_logger

logger = get_logger("Cli")


def _month_key(text: str) -> MonthKey:
    try:
        return MonthKey.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attendance-report",
        description="Monthly attendance summaries and day-by-day grids as spreadsheets."
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_report_args(p: argparse.ArgumentParser):
        p.add_argument("--month", type=_month_key, required=True, help="Report month (YYYY-MM)")
        p.add_argument("--role", default="", help="Roster role filter")
        p.add_argument("--group", default=None, help="Roster group filter (default from config)")
        p.add_argument("--zone", default=None, help="Roster zone filter (default from config)")
        p.add_argument("--source", choices=("api", "workbook"), default="api",
                       help="Where roster, events and leaves come from")
        p.add_argument("--events", type=Path, default=None, help="Event workbook (workbook source)")
        p.add_argument("--roster", type=Path, default=None, help="Roster CSV (workbook source)")
        p.add_argument("--output", type=Path, default=None, help="Output .xlsx path")
        p.add_argument("--strict", action="store_true", help="Fail if any row cannot be fetched")

    summary = sub.add_parser("summary", help="Monthly summary report")
    add_report_args(summary)
    summary.add_argument("--pdf", action="store_true", help="Also write a PDF")

    daily = sub.add_parser("daily", help="Day-by-day check-in/check-out grid")
    add_report_args(daily)

    working_days = sub.add_parser("set-working-days", help="Configure working days for a month")
    working_days.add_argument("--month", type=_month_key, required=True)
    working_days.add_argument("--days", required=True, help="Working days (1-31)")

    return parser


def build_service(args, config: AppConfig, config_manager: ConfigManager) -> AttendanceReportService:
    """Wire providers for the chosen source."""
    grid_builder = DailyGridBuilder(config.report_settings.time_format)

    if args.source == "workbook":
        from infrastructure.excel_parser import WorkbookEventSource
        from infrastructure.roster_csv import CsvRosterProvider

        events_path = args.events or (Path(config.paths.events_workbook) if config.paths.events_workbook else None)
        roster_path = args.roster or (Path(config.paths.roster_csv) if config.paths.roster_csv else None)
        if events_path is None or roster_path is None:
            raise AttendanceError("Workbook source needs --events and --roster (or paths in config)")

        source = WorkbookEventSource()
        source.parse_file(events_path)
        return AttendanceReportService(
            calendar=config_manager.build_calendar(),
            leave_ledger=source,
            event_store=source,
            roster=CsvRosterProvider(roster_path),
            grid_builder=grid_builder,
        )

    from infrastructure.api_client import AttendanceApiClient

    if not config.api.base_url:
        raise AttendanceError("api.base_url is not configured")
    client = AttendanceApiClient(config.api.base_url, timeout=config.api.timeout_seconds)
    return AttendanceReportService(
        calendar=client,
        leave_ledger=client,
        event_store=client,
        roster=client,
        grid_builder=grid_builder,
    )


def _output_path(args, config: AppConfig, pattern: str) -> Path:
    from infrastructure.excel_writer import format_filename

    if args.output:
        return args.output
    output_dir = Path(config.output_settings.output_dir) if config.output_settings.output_dir else Path.cwd()
    return output_dir / format_filename(pattern, args.month)


def _report_outcome(report) -> None:
    if report.state == ReportState.EMPTY:
        logger.info("No roster members matched the filter; the report is empty")
    elif report.state == ReportState.DEGRADED:
        logger.warning(f"Working days for {report.month_key} are not configured; derived columns are blank")
    elif report.state == ReportState.PARTIAL:
        for row in report.failed_rows:
            logger.warning(f"Incomplete row: {row.user.name} ({row.user.id}): {row.error}")


def run_summary(args, config: AppConfig, config_manager: ConfigManager) -> Path:
    from infrastructure.excel_writer import ExcelWriter

    service = build_service(args, config, config_manager)
    params = AttendanceReportService.build_params_from_config(
        config, args.month, role=args.role, group=args.group, zone=args.zone,
        strict=args.strict or None
    )
    report = service.build_monthly_summary_report(params)
    _report_outcome(report)

    output_path = _output_path(args, config, config.output_settings.summary_filename_pattern)
    ExcelWriter().create_summary_report(report, output_path)

    if args.pdf or config.output_settings.generate_pdf:
        from infrastructure.excel_writer import format_filename
        from infrastructure.pdf_writer import PdfWriter

        pdf_path = output_path.parent / format_filename(
            config.output_settings.pdf_filename_pattern, args.month
        )
        PdfWriter(custom_font_path=config.paths.custom_font_path or None).create_summary_report(
            report, pdf_path
        )
    return output_path


def run_daily(args, config: AppConfig, config_manager: ConfigManager) -> Path:
    from infrastructure.excel_writer import ExcelWriter

    service = build_service(args, config, config_manager)
    params = AttendanceReportService.build_params_from_config(
        config, args.month, role=args.role, group=args.group, zone=args.zone,
        strict=args.strict or None
    )
    report = service.build_daily_grid_report(params)
    _report_outcome(report)

    output_path = _output_path(args, config, config.output_settings.daily_filename_pattern)
    return ExcelWriter().create_daily_grid_report(report, output_path)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)

    config_manager = ConfigManager(args.config)
    config = config_manager.load()

    try:
        if args.command == "set-working-days":
            config_manager.set_working_days(args.month, args.days)
        elif args.command == "summary":
            run_summary(args, config, config_manager)
        else:
            run_daily(args, config, config_manager)
    except AttendanceError as e:
        logger.error(str(e))
        return 1
    except PermissionError as e:
        logger.error(f"Cannot write file, it may be open in another program: {e.filename or e}")
        return 1
    except OSError as e:
        logger.error(f"File error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
