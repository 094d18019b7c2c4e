"""
Metrics Aggregator Module

Calculates per-user monthly attendance metrics from raw events,
the configured working days and the approved leave count.
"""

from typing import Iterable, Optional

from .entities import AttendanceEvent, EventStatus, UserMonthlySummary
from .errors import MalformedRecordError


class MetricsAggregator:
    """
    Calculates monthly attendance metrics.

    Provides:
    - Raw counters (check-ins, late check-ins, overtime check-outs)
    - Extra days, holidays and absences relative to the working-days target
    - Net late adjustment

    extra_days and absent are floored at zero; holidays and late_adjustment
    are not, so a misconfigured calendar shows up as negative holidays.
    """

    def count_late_check_ins(self, check_ins: Iterable[AttendanceEvent]) -> int:
        return sum(1 for event in check_ins if event.status == EventStatus.LATE)

    def count_late_check_outs(self, check_outs: Iterable[AttendanceEvent]) -> int:
        return sum(1 for event in check_outs if event.status == EventStatus.OVERTIME)

    def calculate_extra_days(self, total_check_ins: int, working_days: int) -> int:
        """Check-ins beyond the expected count."""
        return max(0, total_check_ins - working_days)

    def calculate_holidays(
        self,
        days_in_month: int,
        working_days: int,
        extra_days: int
    ) -> int:
        """Days that are neither working days nor extra attendance. May be negative."""
        return days_in_month - working_days - extra_days

    def calculate_absent(
        self,
        working_days: int,
        total_check_ins: int,
        approved_leaves: int
    ) -> int:
        """Working days covered by neither a check-in nor an approved leave."""
        return max(0, working_days - total_check_ins - approved_leaves)

    def calculate_late_adjustment(self, late_check_ins: int, late_check_outs: int) -> int:
        return late_check_ins - late_check_outs

    def summarize(
        self,
        working_days: Optional[int],
        days_in_month: int,
        check_ins: Iterable[AttendanceEvent],
        check_outs: Iterable[AttendanceEvent],
        approved_leaves: int = 0
    ) -> UserMonthlySummary:
        """
        Calculate the complete monthly summary for one user.

        Args:
            working_days: Configured working days, or None if the month is unconfigured
            days_in_month: Number of calendar days in the month
            check_ins: The user's check-in events for the month
            check_outs: The user's check-out events for the month
            approved_leaves: Approved leave days for the month

        Returns:
            UserMonthlySummary; holidays/absent/extra_days are None when
            working_days is None

        Raises:
            MalformedRecordError: If approved_leaves is not a non-negative integer
        """
        if isinstance(approved_leaves, bool) or not isinstance(approved_leaves, int) or approved_leaves < 0:
            raise MalformedRecordError(f"Invalid approved leave count: {approved_leaves!r}")

        check_ins = list(check_ins)
        check_outs = list(check_outs)

        total = len(check_ins)
        late_in = self.count_late_check_ins(check_ins)
        late_out = self.count_late_check_outs(check_outs)

        holidays = absent = extra_days = None
        if working_days is not None:
            extra_days = self.calculate_extra_days(total, working_days)
            holidays = self.calculate_holidays(days_in_month, working_days, extra_days)
            absent = self.calculate_absent(working_days, total, approved_leaves)

        return UserMonthlySummary(
            total_check_ins=total,
            late_check_ins=late_in,
            late_check_outs=late_out,
            approved_leaves=approved_leaves,
            holidays=holidays,
            absent=absent,
            extra_days=extra_days,
            late_adjustment=self.calculate_late_adjustment(late_in, late_out),
        )
