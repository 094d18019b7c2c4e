"""
Configuration Manager Module

Handles loading, saving, and managing application configuration.
Provides bi-directional mapping between dataclasses and JSON persistence.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from domain.month_key import MonthKey
from domain.working_days import WorkingDaysCalendar, validate_working_days
from infrastructure.logger import get_logger

logger = get_logger("ConfigManager")


@dataclass
class ApiSettings:
    """Attendance server connection settings."""
    base_url: str = ""
    timeout_seconds: float = 20


@dataclass
class Paths:
    """File paths configuration."""
    roster_csv: str = ""
    events_workbook: str = ""
    custom_font_path: str = ""  # Custom font path for PDF generation


@dataclass
class CalendarSettings:
    """Working days per month, keyed by YYYY-MM."""
    working_days: Dict[str, int] = field(default_factory=dict)


@dataclass
class ReportSettings:
    """Report assembly settings."""
    max_concurrency: int = 10
    strict: bool = False  # True = a failed row fails the whole report
    timeout_seconds: Optional[float] = None
    time_format: str = "%I:%M %p"  # 09:05 AM
    default_group: str = "WH"
    default_zone: str = "RL"


@dataclass
class OutputSettings:
    """Output settings for generated reports ({month_key} placeholder)."""
    output_dir: str = ""  # Default empty = current directory
    summary_filename_pattern: str = "Monthly_Report_{month_key}.xlsx"
    daily_filename_pattern: str = "Detailed_Summary_{month_key}.xlsx"
    generate_pdf: bool = False
    pdf_filename_pattern: str = "Monthly_Report_{month_key}.pdf"


@dataclass
class AppConfig:
    """Main application configuration container."""
    api: ApiSettings = field(default_factory=ApiSettings)
    paths: Paths = field(default_factory=Paths)
    calendar: CalendarSettings = field(default_factory=CalendarSettings)
    report_settings: ReportSettings = field(default_factory=ReportSettings)
    output_settings: OutputSettings = field(default_factory=OutputSettings)


class ConfigManager:
    """
    Manages application configuration with JSON persistence.

    Responsibilities:
    - Load configuration from JSON file
    - Save configuration to JSON file
    - Provide default configuration
    - Convert between dataclass and dict representations
    - Validate working-days entries before they are stored
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH
        self._config: AppConfig = AppConfig()

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from JSON file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = self._dict_to_config(data)
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Failed to load config, using defaults. Error: {e}")
                self._config = AppConfig()
        else:
            self._config = AppConfig()
        return self._config

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = self._config_to_dict(self._config)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def update(self, **kwargs) -> None:
        """Update specific configuration values."""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
        self.save()

    def set_working_days(self, month_key: MonthKey, days) -> int:
        """
        Store the working days for a month and save.

        Raises:
            InvalidWorkingDaysInput: If days is not an integer in 1..31
        """
        value = validate_working_days(str(month_key), days)
        self._config.calendar.working_days[str(month_key)] = value
        self.save()
        logger.info(f"Working days for {month_key} set to {value}")
        return value

    def build_calendar(self) -> WorkingDaysCalendar:
        """Calendar provider over the configured working days."""
        return WorkingDaysCalendar(self._config.calendar.working_days)

    def _config_to_dict(self, config: AppConfig) -> dict:
        """Convert AppConfig dataclass to dictionary."""
        return {
            "api": {
                "base_url": config.api.base_url,
                "timeout_seconds": config.api.timeout_seconds
            },
            "paths": {
                "roster_csv": config.paths.roster_csv,
                "events_workbook": config.paths.events_workbook,
                "custom_font_path": config.paths.custom_font_path
            },
            "calendar": {
                "working_days": dict(sorted(config.calendar.working_days.items()))
            },
            "report_settings": {
                "max_concurrency": config.report_settings.max_concurrency,
                "strict": config.report_settings.strict,
                "timeout_seconds": config.report_settings.timeout_seconds,
                "time_format": config.report_settings.time_format,
                "default_group": config.report_settings.default_group,
                "default_zone": config.report_settings.default_zone
            },
            "output_settings": {
                "output_dir": config.output_settings.output_dir,
                "summary_filename_pattern": config.output_settings.summary_filename_pattern,
                "daily_filename_pattern": config.output_settings.daily_filename_pattern,
                "generate_pdf": config.output_settings.generate_pdf,
                "pdf_filename_pattern": config.output_settings.pdf_filename_pattern
            }
        }

    def _dict_to_config(self, data: dict) -> AppConfig:
        """Convert dictionary to AppConfig dataclass."""
        api_data = data.get("api", {})
        paths_data = data.get("paths", {})
        calendar_data = data.get("calendar", {})
        report_data = data.get("report_settings", {})
        output_data = data.get("output_settings", {})

        api = ApiSettings(
            base_url=api_data.get("base_url", ""),
            timeout_seconds=api_data.get("timeout_seconds", 20)
        )

        paths = Paths(
            roster_csv=paths_data.get("roster_csv", ""),
            events_workbook=paths_data.get("events_workbook", ""),
            custom_font_path=paths_data.get("custom_font_path", "")
        )

        # Drop invalid entries instead of failing the whole load
        working_days = {}
        for key, days in calendar_data.get("working_days", {}).items():
            month_key = MonthKey.try_parse(key)
            if month_key is None:
                logger.warning(f"Ignoring working days entry with invalid month key: {key!r}")
                continue
            try:
                working_days[str(month_key)] = validate_working_days(key, days)
            except ValueError as e:
                logger.warning(f"Ignoring working days entry: {e}")

        calendar = CalendarSettings(working_days=working_days)

        report_settings = ReportSettings(
            max_concurrency=report_data.get("max_concurrency", 10),
            strict=report_data.get("strict", False),
            timeout_seconds=report_data.get("timeout_seconds"),
            time_format=report_data.get("time_format", "%I:%M %p"),
            default_group=report_data.get("default_group", "WH"),
            default_zone=report_data.get("default_zone", "RL")
        )

        output_settings = OutputSettings(
            output_dir=output_data.get("output_dir", ""),
            summary_filename_pattern=output_data.get("summary_filename_pattern", "Monthly_Report_{month_key}.xlsx"),
            daily_filename_pattern=output_data.get("daily_filename_pattern", "Detailed_Summary_{month_key}.xlsx"),
            generate_pdf=output_data.get("generate_pdf", False),
            pdf_filename_pattern=output_data.get("pdf_filename_pattern", "Monthly_Report_{month_key}.pdf")
        )

        return AppConfig(
            api=api,
            paths=paths,
            calendar=calendar,
            report_settings=report_settings,
            output_settings=output_settings
        )
