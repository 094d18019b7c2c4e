"""
Unit tests for CsvRosterProvider.
"""

import pytest
import tempfile
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities import RosterFilter
from infrastructure.roster_csv import CsvRosterProvider


ROSTER_CSV = """Id,Name,Number,Role,Group,Zone,Outlet
1,Rahim,01700000001,staff,WH,RL,Gulshan
2,Mina,01700000002,staff,WH,GVI,Banani
3,Rafi,01700000003,manager,WH,rl,Uttara
,No Id,01700000004,staff,WH,RL,Mirpur
5,,01700000005,staff,WH,RL,Mirpur
6,Tania,01700000006,staff,WH,RL,Dhanmondi
"""


@pytest.fixture
def roster_path():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "users.csv"
        path.write_text(ROSTER_CSV, encoding='utf-8')
        yield path


class TestCsvRosterProvider:
    """Tests for CSV roster loading and filtering."""

    def test_load_skips_incomplete_rows(self, roster_path):
        users = CsvRosterProvider(roster_path).load()

        assert [u.id for u in users] == ["1", "2", "3", "6"]
        assert users[0].name == "Rahim"
        assert users[0].phone == "01700000001"
        assert users[0].outlet == "Gulshan"

    def test_filter_by_zone_keeps_file_order(self, roster_path):
        provider = CsvRosterProvider(roster_path)

        users = provider.get_roster(RosterFilter(zone="RL"))

        assert [u.id for u in users] == ["1", "3", "6"]

    def test_filter_by_role_and_zone(self, roster_path):
        provider = CsvRosterProvider(roster_path)

        users = provider.get_roster(RosterFilter(role="staff", zone="RL"))

        assert [u.name for u in users] == ["Rahim", "Tania"]

    def test_empty_filter_matches_all(self, roster_path):
        assert len(CsvRosterProvider(roster_path).get_roster(RosterFilter())) == 4

    def test_column_aliases(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "users.csv"
            path.write_text(
                "_id,Username,Phone,Department\nabc,Rahim,017,RL\n",
                encoding='utf-8'
            )

            users = CsvRosterProvider(path).load()

            assert users[0].id == "abc"
            assert users[0].name == "Rahim"
            assert users[0].phone == "017"
            assert users[0].zone == "RL"

    def test_missing_file_returns_empty(self):
        provider = CsvRosterProvider(Path("/nonexistent/users.csv"))

        assert provider.load() == []
        assert provider.get_roster(RosterFilter()) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
