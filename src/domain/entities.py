"""
Domain Entities Module

Core domain entities using dataclasses for the attendance report engine.
These entities represent the core business concepts independent of infrastructure.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Dict, List, Optional

from .month_key import MonthKey


class EventKind(Enum):
    """Kind of attendance event."""
    CHECK_IN = "CheckIn"
    CHECK_OUT = "CheckOut"


class EventStatus(Enum):
    """Status recorded by the check-in device."""
    LATE = "Late"          # check-in after the cut-off
    ON_TIME = "OnTime"
    OVERTIME = "Overtime"  # check-out after the cut-off
    NORMAL = "Normal"


class ReportState(Enum):
    """How complete an assembled report is."""
    EMPTY = auto()     # no roster member matched the filter
    COMPLETE = auto()
    DEGRADED = auto()  # computed, but the month has no working-days entry
    PARTIAL = auto()   # some rows failed to fetch


@dataclass(frozen=True)
class AttendanceEvent:
    """
    A single check-in or check-out occurrence.

    Attributes:
        user_id: The user who checked in/out
        timestamp: When it happened (wall-clock, as recorded)
        kind: Check-in or check-out
        status: Late/OnTime for check-ins, Overtime/Normal for check-outs
    """
    user_id: str
    timestamp: datetime
    kind: EventKind
    status: EventStatus


@dataclass(frozen=True)
class UserRef:
    """A roster member as returned by the roster provider."""
    id: str
    name: str
    phone: str = ""
    role: str = ""
    group: str = ""
    zone: str = ""
    outlet: str = ""


@dataclass(frozen=True)
class RosterFilter:
    """Roster filter dimensions. An empty value matches everyone."""
    role: str = ""
    group: str = ""
    zone: str = ""

    def matches(self, user: UserRef) -> bool:
        for wanted, actual in (
            (self.role, user.role),
            (self.group, user.group),
            (self.zone, user.zone),
        ):
            if wanted and wanted.strip().lower() != (actual or "").strip().lower():
                return False
        return True


@dataclass(frozen=True)
class WorkingDaysEntry:
    """Configured number of expected working days for one month."""
    month_key: MonthKey
    expected_working_days: int


@dataclass
class UserMonthlySummary:
    """
    Derived monthly metrics for one user.

    holidays, absent and extra_days are None when the month has no
    working-days entry; the raw counters are always filled in.
    """
    total_check_ins: int
    late_check_ins: int
    late_check_outs: int
    approved_leaves: int
    holidays: Optional[int]
    absent: Optional[int]
    extra_days: Optional[int]
    late_adjustment: int

    @property
    def is_degraded(self) -> bool:
        return self.holidays is None


@dataclass
class DailySlot:
    """Formatted first check-in and check-out for one day ("" when none)."""
    check_in: str = ""
    check_out: str = ""


@dataclass
class DailyAttendanceRow:
    """
    One user's day-by-day grid for a month.

    Attributes:
        month_key: The month the grid covers
        slots: Day of month (1..days_in_month) -> DailySlot
    """
    month_key: MonthKey
    slots: Dict[int, DailySlot] = field(default_factory=dict)

    @property
    def days_in_month(self) -> int:
        return self.month_key.days_in_month

    def slot(self, day: int) -> DailySlot:
        return self.slots[day]


@dataclass
class MonthlySummaryRow:
    """Per-user result in a monthly summary report: a summary or an error."""
    user: UserRef
    summary: Optional[UserMonthlySummary] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass
class DailyGridRow:
    """Per-user result in a daily grid report: a grid or an error."""
    user: UserRef
    grid: Optional[DailyAttendanceRow] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


def _report_state(rows: list, degraded: bool) -> ReportState:
    if not rows:
        return ReportState.EMPTY
    if any(not row.ok for row in rows):
        return ReportState.PARTIAL
    if degraded:
        return ReportState.DEGRADED
    return ReportState.COMPLETE


@dataclass
class MonthlySummaryReport:
    """
    Monthly summary report in roster order.

    Attributes:
        month_key: Report month
        working_days: Configured working days, None if unconfigured
        rows: One row per roster member
    """
    month_key: MonthKey
    working_days: Optional[int]
    rows: List[MonthlySummaryRow] = field(default_factory=list)

    @property
    def days_in_month(self) -> int:
        return self.month_key.days_in_month

    @property
    def state(self) -> ReportState:
        return _report_state(self.rows, self.working_days is None)

    @property
    def failed_rows(self) -> List[MonthlySummaryRow]:
        return [row for row in self.rows if not row.ok]


@dataclass
class DailyGridReport:
    """Daily grid report in roster order."""
    month_key: MonthKey
    working_days: Optional[int]
    rows: List[DailyGridRow] = field(default_factory=list)

    @property
    def days_in_month(self) -> int:
        return self.month_key.days_in_month

    @property
    def state(self) -> ReportState:
        # the grid does not depend on the working-days count
        return _report_state(self.rows, False)

    @property
    def failed_rows(self) -> List[DailyGridRow]:
        return [row for row in self.rows if not row.ok]
