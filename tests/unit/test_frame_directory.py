"""
Unit tests for the pandas-backed directory.
"""

import pandas as pd
import pytest

from rollcall.directory import DataFrameDirectory, DirectoryFilter, DirectoryRecord, NamePattern
from rollcall.errors import DirectoryQueryError, DirectoryUnavailable
from rollcall.identity import IdentityResolver, MatchTier


def query(surname: NamePattern, given: NamePattern) -> DirectoryFilter:
    return DirectoryFilter(surname=surname, given_name=given)


@pytest.fixture
def directory(sample_records) -> DataFrameDirectory:
    return DataFrameDirectory.from_records(sample_records)


class TestNamePattern:
    """Tests for local pattern evaluation."""

    def test_exact(self):
        """Test exact matching is case-insensitive by default."""
        assert NamePattern.exact("smith").matches("Smith")
        assert not NamePattern.exact("Smith").matches("Smithers")
        assert not NamePattern.exact("smith").matches("Smith", case_sensitive=True)

    def test_prefix(self):
        """Test prefix matching."""
        assert NamePattern.starts_with("Sm").matches("Smythe")
        assert not NamePattern.starts_with("Sm").matches("Garcia")
        assert str(NamePattern.starts_with("J")) == "J*"


class TestFindUsers:
    """Tests for DataFrameDirectory.find_users."""

    def test_exact(self, directory):
        """Test an exact surname + given name query."""
        records = directory.find_users(query(NamePattern.exact("Smith"), NamePattern.exact("John")))
        assert [r.account_name for r in records] == ["jsmith"]
        assert records[0] == DirectoryRecord(
            account_name="jsmith",
            given_name="John",
            initials="E",
            surname="Smith",
            description="Engineering",
            mail="jsmith@example.com",
        )

    def test_given_name_prefix(self, directory):
        """Test a prefix on the given name."""
        records = directory.find_users(query(NamePattern.exact("smith"), NamePattern.starts_with("j")))
        assert sorted(r.account_name for r in records) == ["jasmith", "jsmith"]

    def test_surname_prefix(self, directory):
        """Test a prefix on the surname."""
        records = directory.find_users(query(NamePattern.starts_with("S"), NamePattern.exact("John")))
        assert sorted(r.account_name for r in records) == ["jsmith", "jsmythe"]

    def test_case_sensitive(self, sample_records):
        """Test opting into case-sensitive matching."""
        directory = DataFrameDirectory.from_records(sample_records, case_sensitive=True)
        assert directory.find_users(query(NamePattern.exact("smith"), NamePattern.exact("John"))) == []

    def test_no_match(self, directory):
        """Test an empty result."""
        assert directory.find_users(query(NamePattern.exact("Nobody"), NamePattern.exact("X"))) == []


class TestLoading:
    """Tests for building directories from exports."""

    def test_from_csv_with_ad_columns(self, tmp_path):
        """Test loading an AD-style export with aliased column names."""
        path = tmp_path / "users.csv"
        path.write_text(
            "sAMAccountName,givenName,sn,email,department\n"
            "jsmith,John,Smith,john.smith@example.com,Eng\n"
            "mgarcia,Maria,Garcia,,HR\n"
        )
        directory = DataFrameDirectory.from_csv(path)

        assert len(directory) == 2
        record = directory.find_users(query(NamePattern.exact("Garcia"), NamePattern.exact("Maria")))[0]
        assert record.account_name == "mgarcia"
        assert record.mail == ""
        assert record.initials == ""

    def test_missing_file(self, tmp_path):
        """Test that a missing export is reported as an unavailable directory."""
        with pytest.raises(DirectoryUnavailable):
            DataFrameDirectory.from_csv(tmp_path / "missing.csv")

    def test_missing_file_names_env_override(self, tmp_path):
        """Test that a missing export points at ROLLCALL_CSV_PATH."""
        with pytest.raises(DirectoryUnavailable, match="ROLLCALL_CSV_PATH"):
            DataFrameDirectory.from_csv(tmp_path / "missing.csv")

    def test_missing_name_columns(self):
        """Test that data without name columns is rejected."""
        with pytest.raises(DirectoryQueryError):
            DataFrameDirectory(pd.DataFrame({"account_name": ["x"]}))

    def test_empty_directory(self):
        """Test that an empty directory resolves to no match."""
        directory = DataFrameDirectory.from_records([])
        assert IdentityResolver(directory).resolve_detailed("John Smith").tier is MatchTier.NONE


class TestEndToEnd:
    """Cascade behaviour against realistic data."""

    def test_resolutions(self, directory):
        """Test each tier against the sample directory."""
        resolver = IdentityResolver(directory)

        exact = resolver.resolve_detailed("Smith, John E.")
        assert exact.tier is MatchTier.EXACT
        assert exact.results[0].account_name == "jsmith"

        by_initial = resolver.resolve_detailed("Jo Smith")
        assert by_initial.tier is MatchTier.LAST_NAME
        assert by_initial.match_count == 2

        by_first = resolver.resolve_detailed("Michael Obrien")
        assert by_first.tier is MatchTier.FIRST_NAME
        assert by_first.results[0].account_name == "mobrien"
