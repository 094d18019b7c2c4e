"""
API Client Module

Provider implementations backed by the attendance server's REST API.
"""

from typing import List, Optional

import requests

from domain.entities import AttendanceEvent, EventKind, RosterFilter, UserRef
from domain.errors import (
    MalformedRecordError, MissingCalendarConfig, ProviderFetchFailure,
    ReportGenerationError
)
from domain.event_parsing import build_event, parse_leave_days
from domain.month_key import MonthKey
from domain.providers import (
    CalendarProvider, EventStoreProvider, LeaveLedgerProvider, RosterProvider
)
from domain.working_days import validate_working_days
from infrastructure.logger import get_logger

logger = get_logger("ApiClient")


class AttendanceApiClient(CalendarProvider, LeaveLedgerProvider, EventStoreProvider, RosterProvider):
    """
    Client for the attendance server.

    Endpoints:
    - GET  /api/workingdays?month=YYYY-MM
    - POST /api/workingdays
    - GET  /api/leave-requests/user/{id}/monthly?month=MM&year=YYYY
    - GET  /api/checkins/{id}?month=MM&year=YYYY
    - GET  /api/checkouts/{id}?month=MM&year=YYYY
    - GET  /getAllUser?role=&group=&zone=
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 20,
        session: Optional[requests.Session] = None
    ):
        if not base_url:
            raise ValueError("API base URL is not configured")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[dict] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} params={params}")
        return self.session.get(url, params=params, timeout=self.timeout)

    def _get_json(self, path: str, params: dict, user_id: str, source: str):
        try:
            resp = self._get(path, params)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderFetchFailure(user_id, source, e) from e

    # ------------------------------------------------------------------
    # Calendar
    # ------------------------------------------------------------------
    def get_working_days(self, month_key: MonthKey) -> int:
        resp = self._get("/api/workingdays", {"month": str(month_key)})
        if resp.status_code == 404:
            raise MissingCalendarConfig(str(month_key))
        resp.raise_for_status()

        data = resp.json() or {}
        value = data.get("workingDays")
        if value is None:
            raise MissingCalendarConfig(str(month_key))
        try:
            return validate_working_days(str(month_key), value)
        except ValueError as e:
            raise MalformedRecordError(str(e)) from e

    def save_working_days(self, month_key: MonthKey, days) -> int:
        """Create or update the working-days entry for a month."""
        value = validate_working_days(str(month_key), days)
        resp = self.session.post(
            f"{self.base_url}/api/workingdays",
            json={"month": str(month_key), "workingDays": value},
            timeout=self.timeout
        )
        resp.raise_for_status()
        logger.info(f"Saved {value} working days for {month_key}")
        return value

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------
    def get_approved_leaves(self, user_id: str, month_key: MonthKey) -> int:
        data = self._get_json(
            f"/api/leave-requests/user/{user_id}/monthly",
            {"month": month_key.month_str, "year": str(month_key.year)},
            user_id, "approved leaves"
        )
        return parse_leave_days((data or {}).get("leaveDays"), user_id)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def _get_events(self, user_id: str, month_key: MonthKey, kind: EventKind) -> List[AttendanceEvent]:
        path, source = (
            ("/api/checkins", "check-ins") if kind == EventKind.CHECK_IN
            else ("/api/checkouts", "check-outs")
        )
        data = self._get_json(
            f"{path}/{user_id}",
            {"month": month_key.month_str, "year": str(month_key.year)},
            user_id, source
        )
        if not isinstance(data, list):
            raise MalformedRecordError(f"Expected a list of {source} for user {user_id}")

        events = []
        for item in data:
            if not isinstance(item, dict):
                raise MalformedRecordError(f"Unexpected {source} entry for user {user_id}: {item!r}")
            events.append(build_event(user_id, item.get("time"), kind, item.get("status")))
        return events

    def get_check_ins(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        return self._get_events(user_id, month_key, EventKind.CHECK_IN)

    def get_check_outs(self, user_id: str, month_key: MonthKey) -> List[AttendanceEvent]:
        return self._get_events(user_id, month_key, EventKind.CHECK_OUT)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------
    def get_roster(self, roster_filter: RosterFilter) -> List[UserRef]:
        params = {
            "role": roster_filter.role,
            "group": roster_filter.group,
            "zone": roster_filter.zone,
        }
        try:
            resp = self._get("/getAllUser", params)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ReportGenerationError(f"Failed to load roster: {e}") from e

        users = []
        for item in data or []:
            users.append(UserRef(
                id=str(item.get("_id") or item.get("id") or ""),
                name=item.get("name") or "",
                phone=str(item.get("number") or ""),
                role=item.get("role") or "",
                group=item.get("group") or "",
                zone=item.get("zone") or "",
                outlet=item.get("outlet") or "N/A",
            ))
        logger.info(f"Roster returned {len(users)} users for {params}")
        return users
