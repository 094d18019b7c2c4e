"""
Roster CSV Module

Handles loading roster members from CSV files.
"""

import csv
from pathlib import Path
from typing import List

from domain.entities import RosterFilter, UserRef
from domain.providers import RosterProvider
from infrastructure.logger import get_logger

logger = get_logger("RosterCsv")


class CsvRosterProvider(RosterProvider):
    """
    Roster loaded from a CSV file.

    The CSV should have columns: Id, Name, Number, Role, Group, Zone, Outlet
    (Phone is accepted for Number, and headers are case-insensitive).
    Rows without an id or name are skipped. File order is preserved.
    """

    COLUMN_ALIASES = {
        "id": ("id", "_id", "user id", "userid"),
        "name": ("name", "username"),
        "phone": ("number", "phone", "phone number"),
        "role": ("role",),
        "group": ("group",),
        "zone": ("zone", "department"),
        "outlet": ("outlet",),
    }

    def __init__(self, csv_path: Path):
        self.csv_path = Path(csv_path)
        self._users: List[UserRef] = []
        self._loaded = False

    def load(self) -> List[UserRef]:
        """
        Load the roster from the CSV file.

        Returns:
            All users in file order (empty if the file does not exist)
        """
        self._users = []
        self._loaded = True

        if not self.csv_path.exists():
            logger.warning(f"Roster file not found: {self.csv_path}")
            return []

        with open(self.csv_path, 'r', encoding='utf-8-sig', newline='') as f:
            reader = csv.DictReader(f)
            for row in reader:
                values = self._normalize_row(row)
                if not values["id"] or not values["name"]:
                    continue
                self._users.append(UserRef(**values))

        logger.info(f"Loaded {len(self._users)} roster members from {self.csv_path.name}")
        return list(self._users)

    def _normalize_row(self, row: dict) -> dict:
        lowered = {
            (key or "").strip().lower(): (value or "").strip()
            for key, value in row.items()
            if key is not None  # overflow cells of over-long rows
        }
        values = {}
        for field_name, aliases in self.COLUMN_ALIASES.items():
            values[field_name] = next(
                (lowered[alias] for alias in aliases if lowered.get(alias)),
                ""
            )
        return values

    @property
    def all_users(self) -> List[UserRef]:
        if not self._loaded:
            self.load()
        return list(self._users)

    def get_roster(self, roster_filter: RosterFilter) -> List[UserRef]:
        return [user for user in self.all_users if roster_filter.matches(user)]
