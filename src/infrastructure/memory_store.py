"""
Memory Store Module

In-memory providers for rosters, events and leave counts. Used by tests
and by callers that already hold the data in memory.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from domain.entities import AttendanceEvent, EventKind, RosterFilter, UserRef
from domain.month_key import MonthKey
from domain.providers import EventStoreProvider, LeaveLedgerProvider, RosterProvider


class InMemoryRoster(RosterProvider):
    """Roster held as a list; filtering keeps list order."""

    def __init__(self, users: Optional[Iterable[UserRef]] = None):
        self._users: List[UserRef] = list(users or [])

    def get_roster(self, roster_filter: RosterFilter) -> List[UserRef]:
        return [user for user in self._users if roster_filter.matches(user)]


class InMemoryEventStore(EventStoreProvider):
    """Append-only event list; queries keep insertion order."""

    def __init__(self, events: Optional[Iterable[AttendanceEvent]] = None):
        self._events: List[AttendanceEvent] = list(events or [])

    def add(self, event: AttendanceEvent) -> None:
        self._events.append(event)

    def _select(self, user_id: str, month_key: MonthKey, kind: EventKind) -> List[AttendanceEvent]:
        return [
            event for event in self._events
            if event.user_id == user_id
            and event.kind == kind
            and month_key.contains(event.timestamp.date())
        ]

    def get_check_ins(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        return self._select(user_id, month_key, EventKind.CHECK_IN)

    def get_check_outs(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        return self._select(user_id, month_key, EventKind.CHECK_OUT)


class InMemoryLeaveLedger(LeaveLedgerProvider):
    """Approved leave counts keyed by (user, month). Unknown pairs count as zero."""

    def __init__(self):
        self._counts: Dict[Tuple[str, MonthKey], int] = {}

    def set_approved_leaves(self, user_id: str, month_key: MonthKey, days: int) -> None:
        self._counts[(user_id, month_key)] = days

    def get_approved_leaves(self, user_id: str, month_key: MonthKey) -> int:
        return self._counts.get((user_id, month_key), 0)
