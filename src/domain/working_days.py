"""
Working Days Module

In-memory working-days calendar with validation at the write boundary.
"""

from typing import Dict, List, Mapping, Optional

from .entities import WorkingDaysEntry
from .errors import InvalidWorkingDaysInput, MissingCalendarConfig
from .month_key import MonthKey
from .providers import CalendarProvider


MIN_WORKING_DAYS = 1
MAX_WORKING_DAYS = 31


def validate_working_days(month_key: str, value) -> int:
    """
    Validate a working-days value before it is stored.

    Args:
        month_key: Month the value is for (used in the error message)
        value: Integer (or integer-valued string) in 1..31

    Returns:
        The value as int

    Raises:
        InvalidWorkingDaysInput: If the value is not an integer in range
    """
    if isinstance(value, bool):
        raise InvalidWorkingDaysInput(str(month_key), value)
    if isinstance(value, str):
        text = value.strip()
        if not text.isdigit():
            raise InvalidWorkingDaysInput(str(month_key), value)
        value = int(text)
    if not isinstance(value, int):
        raise InvalidWorkingDaysInput(str(month_key), value)
    if not MIN_WORKING_DAYS <= value <= MAX_WORKING_DAYS:
        raise InvalidWorkingDaysInput(str(month_key), value)
    return value


class WorkingDaysCalendar(CalendarProvider):
    """
    Working-days calendar keyed by month.

    At most one entry per month; a month without an entry is unconfigured
    and get_working_days raises MissingCalendarConfig for it.
    """

    def __init__(self, entries: Optional[Mapping[str, int]] = None):
        self._entries: Dict[MonthKey, int] = {}
        for key, days in (entries or {}).items():
            self.set_working_days(MonthKey.parse(key), days)

    def set_working_days(self, month_key: MonthKey, days) -> WorkingDaysEntry:
        """Create or replace the entry for a month."""
        value = validate_working_days(str(month_key), days)
        self._entries[month_key] = value
        return WorkingDaysEntry(month_key, value)

    def get_working_days(self, month_key: MonthKey) -> int:
        if month_key not in self._entries:
            raise MissingCalendarConfig(str(month_key))
        return self._entries[month_key]

    @property
    def entries(self) -> List[WorkingDaysEntry]:
        """All entries, oldest month first."""
        return [
            WorkingDaysEntry(key, days)
            for key, days in sorted(self._entries.items(), key=lambda item: (item[0].year, item[0].month))
        ]

    def to_dict(self) -> Dict[str, int]:
        return {str(entry.month_key): entry.expected_working_days for entry in self.entries}
