"""
Daily Grid Module

Builds a per-day {first-in, first-out} grid for one user and month.
"""

from datetime import date, datetime
from typing import Dict, Iterable, Optional

from .entities import AttendanceEvent, DailyAttendanceRow, DailySlot
from .month_key import MonthKey


DEFAULT_TIME_FORMAT = "%I:%M %p"


def index_by_date(events: Iterable[AttendanceEvent]) -> Dict[date, AttendanceEvent]:
    """
    Index events by calendar date.

    When several events share a date, the first one in input order is kept.
    """
    index: Dict[date, AttendanceEvent] = {}
    for event in events:
        index.setdefault(event.timestamp.date(), event)
    return index


class DailyGridBuilder:
    """
    Builds DailyAttendanceRow grids.

    Each day of the month gets exactly one slot. The check-in and check-out
    shown for a day are the first matching events in input order; days
    without events get empty text.
    """

    def __init__(self, time_format: str = DEFAULT_TIME_FORMAT):
        self.time_format = time_format

    def format_time(self, timestamp: Optional[datetime]) -> str:
        if timestamp is None:
            return ""
        return timestamp.strftime(self.time_format)

    def build(
        self,
        month_key: MonthKey,
        check_ins: Iterable[AttendanceEvent],
        check_outs: Iterable[AttendanceEvent]
    ) -> DailyAttendanceRow:
        """
        Build the grid for one user.

        Args:
            month_key: The month to cover
            check_ins: The user's check-in events
            check_outs: The user's check-out events

        Returns:
            DailyAttendanceRow with one slot per calendar day
        """
        ins_by_date = index_by_date(check_ins)
        outs_by_date = index_by_date(check_outs)

        slots: Dict[int, DailySlot] = {}
        for day in range(1, month_key.days_in_month + 1):
            d = month_key.date_for(day)
            check_in = ins_by_date.get(d)
            check_out = outs_by_date.get(d)
            slots[day] = DailySlot(
                check_in=self.format_time(check_in.timestamp) if check_in else "",
                check_out=self.format_time(check_out.timestamp) if check_out else "",
            )

        return DailyAttendanceRow(month_key=month_key, slots=slots)
