"""
Providers Module

Abstract contracts for the external data sources the report engine reads from.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List

from .entities import AttendanceEvent, RosterFilter, UserRef
from .month_key import MonthKey


class CalendarProvider(ABC):
    """Supplies the configured number of working days per month."""

    @abstractmethod
    def get_working_days(self, month_key: MonthKey) -> int:
        """
        Get the expected working days for a month.

        Raises:
            MissingCalendarConfig: If the month has no entry
        """
        pass


class LeaveLedgerProvider(ABC):
    """Supplies approved leave day counts."""

    @abstractmethod
    def get_approved_leaves(self, user_id: str, month_key: MonthKey) -> int:
        """Get the number of approved leave days for a user in a month."""
        pass


class EventStoreProvider(ABC):
    """Supplies raw check-in and check-out events."""

    @abstractmethod
    def get_check_ins(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        pass

    @abstractmethod
    def get_check_outs(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        pass


class RosterProvider(ABC):
    """Supplies the users a report covers."""

    @abstractmethod
    def get_roster(self, roster_filter: RosterFilter) -> List[UserRef]:
        """
        Get the users matching a filter.

        Returns:
            Users in the provider's own order
        """
        pass
