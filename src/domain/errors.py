"""
Errors Module

Exception hierarchy shared by the domain, application and infrastructure layers.
"""

from typing import Optional


class AttendanceError(Exception):
    """Base exception for attendance-related errors."""
    pass


class InvalidMonthKeyError(AttendanceError, ValueError):
    """Raised when a month key is not a valid YYYY-MM string."""
    pass


class InvalidWorkingDaysInput(AttendanceError, ValueError):
    """
    Raised when a working-days value outside 1..31 is written to a calendar.

    Rejected at the write boundary so it never reaches the aggregator.
    """
    def __init__(self, month_key: str, value, message: str = None):
        self.month_key = month_key
        self.value = value
        self.message = message or (
            f"Working days for {month_key} must be an integer between 1 and 31, got {value!r}"
        )
        super().__init__(self.message)


class MissingCalendarConfig(AttendanceError):
    """Raised by a calendar provider when a month has no working-days entry."""
    def __init__(self, month_key: str):
        self.month_key = month_key
        super().__init__(f"No working days configured for {month_key}")


class ProviderFetchFailure(AttendanceError):
    """
    Raised when fetching one roster member's data fails.

    Attributes:
        user_id: The user whose data could not be fetched
        source: Which provider call failed (e.g. "check-ins")
        cause: The underlying exception, if any
    """
    def __init__(self, user_id: str, source: str, cause: Optional[BaseException] = None):
        self.user_id = user_id
        self.source = source
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to fetch {source} for user {user_id}{detail}")


class MalformedRecordError(AttendanceError):
    """Raised when a provider returns a record that cannot be interpreted."""
    pass


class ReportGenerationError(AttendanceError):
    """Raised when a report as a whole cannot be produced."""
    pass


class ExcelFormatError(AttendanceError):
    """Raised when the Excel file format is unrecognized or invalid."""
    pass
