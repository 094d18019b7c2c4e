"""
Month Key Module

Parses and represents YYYY-MM month keys used to scope calendar,
leave and event queries to one month.
"""

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date
from typing import ClassVar, Optional

from .errors import InvalidMonthKeyError


@dataclass(frozen=True)
class MonthKey:
    """
    A single calendar month.

    Expected text format: YYYY-MM (e.g., "2025-02" = February 2025)
    """
    year: int
    month: int

    PATTERN: ClassVar[re.Pattern] = re.compile(r'^(\d{4})-(\d{2})$')

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise InvalidMonthKeyError(f"Invalid month: {self.month}")

    @classmethod
    def parse(cls, text: str) -> "MonthKey":
        """
        Parse a month key string.

        Args:
            text: The month key to parse (e.g., "2025-02")

        Returns:
            MonthKey instance

        Raises:
            InvalidMonthKeyError: If text doesn't match YYYY-MM or the month is out of range
        """
        match = cls.PATTERN.match((text or "").strip())
        if not match:
            raise InvalidMonthKeyError(f"Invalid month key: {text!r}. Expected format: YYYY-MM")

        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def try_parse(cls, text: str) -> Optional["MonthKey"]:
        """Parse a month key, returning None on failure."""
        try:
            return cls.parse(text)
        except InvalidMonthKeyError:
            return None

    @property
    def days_in_month(self) -> int:
        _, num_days = monthrange(self.year, self.month)
        return num_days

    @property
    def month_str(self) -> str:
        """Zero-padded month number, as the attendance server expects it."""
        return f"{self.month:02d}"

    def date_for(self, day: int) -> date:
        """Calendar date for a day of this month."""
        return date(self.year, self.month, day)

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
