"""
Excel Parser Module

Reads exported attendance workbooks: one or more event sheets
(User / Time / Type / Status) and an optional approved-leave sheet
(User / Month / Days). Serves them through the provider contracts.
"""

import zipfile
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from domain.entities import AttendanceEvent, EventKind
from domain.errors import ExcelFormatError, MalformedRecordError
from domain.event_parsing import build_event, parse_kind, parse_leave_days
from domain.month_key import MonthKey
from domain.providers import EventStoreProvider, LeaveLedgerProvider
from infrastructure.logger import get_logger

logger = get_logger("ExcelParser")


# ==============================================================================
# Data Classes
# ==============================================================================
@dataclass
class RawEventRow:
    """Raw event data from Excel, converted lazily per user."""
    user_id: str
    time_value: object
    kind_value: object
    status_value: object
    location: str  # "Sheet!row" for error messages


@dataclass
class RawLeaveRow:
    """Raw approved-leave data from Excel."""
    user_id: str
    month_value: object
    days_value: object
    location: str


# ==============================================================================
# WorkbookEventSource Class
# ==============================================================================
class WorkbookEventSource(EventStoreProvider, LeaveLedgerProvider):
    """
    Parses exported event workbooks.

    Handles:
    - Header detection within the first MAX_HEADER_SEARCH_ROWS rows of every sheet
    - Event sheets and leave sheets in the same workbook
    - Per-user conversion, so a malformed cell only fails the affected user
    """

    USER_KEYWORDS = ('user', 'employee', 'staff')
    TIME_KEYWORDS = ('time', 'timestamp')
    KIND_KEYWORDS = ('type', 'kind', 'punch')
    STATUS_KEYWORDS = ('status',)
    MONTH_KEYWORDS = ('month',)
    DAYS_KEYWORDS = ('days', 'leave')

    # Maximum rows to search for header
    MAX_HEADER_SEARCH_ROWS = 15

    def __init__(self):
        self._events: Dict[str, List[RawEventRow]] = {}
        self._leaves: Dict[str, List[RawLeaveRow]] = {}

    def parse_file(self, file_path: Path) -> int:
        """
        Parse an Excel workbook.

        Args:
            file_path: Path to the Excel file

        Returns:
            Number of raw event rows read

        Raises:
            ExcelFormatError: If the file is missing or is not a readable workbook,
                or no sheet has recognizable event columns
        """
        self._events = {}
        self._leaves = {}
        file_path = Path(file_path)

        if not file_path.exists():
            raise ExcelFormatError(f"Event workbook not found: {file_path}")

        logger.info(f"Parsing event workbook: {file_path.name}")

        try:
            wb = load_workbook(file_path, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
            raise ExcelFormatError(f"Cannot open event workbook '{file_path.name}': {e}") from e
        found_event_sheet = False
        try:
            for ws in wb.worksheets:
                columns = self._detect_columns(ws)
                if columns is None:
                    logger.warning(f"Sheet '{ws.title}' has no recognizable header, skipped")
                    continue
                header_row, mapping = columns
                if 'time' in mapping and 'kind' in mapping:
                    found_event_sheet = True
                    self._read_event_rows(ws, header_row, mapping)
                else:
                    self._read_leave_rows(ws, header_row, mapping)
        finally:
            wb.close()

        if not found_event_sheet:
            raise ExcelFormatError(
                f"No sheet in '{file_path.name}' has User, Time and Type columns "
                f"within the first {self.MAX_HEADER_SEARCH_ROWS} rows"
            )

        total = sum(len(rows) for rows in self._events.values())
        logger.info(f"Parsed {total} event rows for {len(self._events)} users")
        return total

    def _detect_columns(self, ws: Worksheet):
        """
        Find the header row and map column roles to indexes.

        Returns:
            (header_row, {role: column_index}) or None if the sheet has no
            usable header
        """
        rows = ws.iter_rows(min_row=1, max_row=self.MAX_HEADER_SEARCH_ROWS, values_only=True)
        for row_idx, values in enumerate(rows, start=1):
            mapping: Dict[str, int] = {}
            for col_idx, value in enumerate(values):
                text = str(value or '').strip().lower()
                if not text:
                    continue
                if 'user' not in mapping and any(k in text for k in self.USER_KEYWORDS):
                    mapping['user'] = col_idx
                elif 'status' not in mapping and any(k in text for k in self.STATUS_KEYWORDS):
                    mapping['status'] = col_idx
                elif 'month' not in mapping and any(k in text for k in self.MONTH_KEYWORDS):
                    mapping['month'] = col_idx
                elif 'time' not in mapping and any(k in text for k in self.TIME_KEYWORDS):
                    mapping['time'] = col_idx
                elif 'kind' not in mapping and any(k in text for k in self.KIND_KEYWORDS):
                    mapping['kind'] = col_idx
                elif 'days' not in mapping and any(k in text for k in self.DAYS_KEYWORDS):
                    mapping['days'] = col_idx

            if 'user' not in mapping:
                continue
            if 'time' in mapping and 'kind' in mapping:
                return row_idx, mapping
            if 'month' in mapping and 'days' in mapping:
                return row_idx, mapping
        return None

    @staticmethod
    def _cell(values: tuple, index: Optional[int]):
        if index is None or index >= len(values):
            return None
        return values[index]

    def _read_event_rows(self, ws: Worksheet, header_row: int, mapping: Dict[str, int]) -> None:
        for row_idx, values in enumerate(
            ws.iter_rows(min_row=header_row + 1, values_only=True),
            start=header_row + 1
        ):
            user_id = str(self._cell(values, mapping['user']) or '').strip()
            if not user_id:
                continue
            self._events.setdefault(user_id, []).append(RawEventRow(
                user_id=user_id,
                time_value=self._cell(values, mapping['time']),
                kind_value=self._cell(values, mapping['kind']),
                status_value=self._cell(values, mapping.get('status')),
                location=f"{ws.title}!{row_idx}",
            ))

    def _read_leave_rows(self, ws: Worksheet, header_row: int, mapping: Dict[str, int]) -> None:
        count = 0
        for row_idx, values in enumerate(
            ws.iter_rows(min_row=header_row + 1, values_only=True),
            start=header_row + 1
        ):
            user_id = str(self._cell(values, mapping['user']) or '').strip()
            if not user_id:
                continue
            self._leaves.setdefault(user_id, []).append(RawLeaveRow(
                user_id=user_id,
                month_value=self._cell(values, mapping['month']),
                days_value=self._cell(values, mapping['days']),
                location=f"{ws.title}!{row_idx}",
            ))
            count += 1
        logger.debug(f"Sheet '{ws.title}': {count} leave rows")

    def _convert_events(self, user_id: str, month_key: MonthKey, kind: EventKind) -> List[AttendanceEvent]:
        """Convert a user's raw rows, keeping sheet order."""
        events = []
        for raw in self._events.get(user_id, []):
            try:
                raw_kind = parse_kind(raw.kind_value)
                if raw_kind != kind:
                    continue
                event = build_event(user_id, raw.time_value, raw_kind, raw.status_value)
            except MalformedRecordError as e:
                raise MalformedRecordError(f"{raw.location}: {e}") from e
            if month_key.contains(event.timestamp.date()):
                events.append(event)
        return events

    def get_check_ins(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        return self._convert_events(user_id, month_key, EventKind.CHECK_IN)

    def get_check_outs(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        return self._convert_events(user_id, month_key, EventKind.CHECK_OUT)

    def get_approved_leaves(self, user_id: str, month_key: MonthKey) -> int:
        """Sum of approved leave days recorded for the user in the month."""
        total = 0
        for raw in self._leaves.get(user_id, []):
            row_month = self._extract_month(raw.month_value)
            if row_month is None:
                raise MalformedRecordError(f"{raw.location}: invalid month {raw.month_value!r}")
            if row_month == month_key:
                total += parse_leave_days(raw.days_value, user_id)
        return total

    @staticmethod
    def _extract_month(value) -> Optional[MonthKey]:
        if isinstance(value, (datetime, date)):
            return MonthKey(value.year, value.month)
        return MonthKey.try_parse(str(value or ''))

    @property
    def user_ids(self) -> List[str]:
        """Users with at least one event row, in first-seen order."""
        return list(self._events)
