"""
Event Parsing Module

Converts raw values from event sources (API payloads, spreadsheet cells)
into domain values.
"""

import math
from datetime import date, datetime
from typing import Optional

from .entities import AttendanceEvent, EventKind, EventStatus
from .errors import MalformedRecordError


KIND_MAPPING = {
    "checkin": EventKind.CHECK_IN,
    "check-in": EventKind.CHECK_IN,
    "check in": EventKind.CHECK_IN,
    "in": EventKind.CHECK_IN,
    "checkout": EventKind.CHECK_OUT,
    "check-out": EventKind.CHECK_OUT,
    "check out": EventKind.CHECK_OUT,
    "out": EventKind.CHECK_OUT,
}


def parse_timestamp(value) -> datetime:
    """
    Parse an event timestamp.

    Accepts datetime/date objects (as read from spreadsheets) and ISO 8601
    strings, including a trailing "Z". Offsets are dropped and the
    wall-clock time is kept as recorded, with no conversion to local time:
    "2025-02-03T23:30:00Z" stays on the 3rd at 23:30 whatever the host
    timezone. Servers that store UTC will show UTC times in the grid.

    Raises:
        MalformedRecordError: If the value cannot be interpreted
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        raise MalformedRecordError(f"Missing or invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError:
        raise MalformedRecordError(f"Invalid timestamp: {value!r}")


def parse_kind(value) -> EventKind:
    """Parse an event kind ("In", "CheckOut", ...)."""
    key = str(value or "").strip().lower()
    if key in KIND_MAPPING:
        return KIND_MAPPING[key]
    raise MalformedRecordError(f"Unknown event type: {value!r}")


def parse_status(value, kind: EventKind) -> EventStatus:
    """
    Parse a device status.

    Only "Late" (check-in) and "Overtime" (check-out) carry meaning;
    anything else is treated as on time / normal.
    """
    text = str(value or "").strip().lower()
    if kind == EventKind.CHECK_IN:
        return EventStatus.LATE if text == "late" else EventStatus.ON_TIME
    return EventStatus.OVERTIME if text == "overtime" else EventStatus.NORMAL


def parse_leave_days(value, user_id: str = "") -> int:
    """
    Parse an approved-leave count. Missing values count as zero.

    Raises:
        MalformedRecordError: If the value is non-numeric, fractional or negative
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise MalformedRecordError(f"Invalid leave count for user {user_id}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedRecordError(f"Invalid leave count for user {user_id}: {value!r}")
    if not math.isfinite(number) or number < 0 or number != int(number):
        raise MalformedRecordError(f"Invalid leave count for user {user_id}: {value!r}")
    return int(number)


def build_event(
    user_id: str,
    raw_time,
    kind: EventKind,
    raw_status: Optional[str] = None
) -> AttendanceEvent:
    """Build an AttendanceEvent from raw values."""
    return AttendanceEvent(
        user_id=user_id,
        timestamp=parse_timestamp(raw_time),
        kind=kind,
        status=parse_status(raw_status, kind),
    )
