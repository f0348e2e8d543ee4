"""
Unit tests for the rollcall command-line interface.
"""

import json

import pytest

from rollcall import cli


@pytest.fixture
def users_csv(tmp_path):
    path = tmp_path / "users.csv"
    path.write_text(
        "samaccountname,givenname,initials,sn,description,email\n"
        "jsmith,John,E,Smith,Engineering,john.smith@example.com\n"
        "jasmith,Jane,A,Smith,Finance,jane.smith@example.com\n"
        "mgarcia,Maria,L,Garcia,HR,maria.garcia@example.com\n"
    )
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ROLLCALL_BACKEND", "ROLLCALL_CSV_PATH", "ROLLCALL_CASING", "ROLLCALL_LOCALE"):
        monkeypatch.delenv(name, raising=False)


class TestParseCommand:
    """Tests for `rollcall parse`."""

    def test_parse(self, capsys):
        """Test printing a parsed name as JSON."""
        assert cli.main(["parse", "smith, john e.", "--casing", "title"]) == cli.EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["first_name"] == "John"
        assert data["last_name"] == "Smith"
        assert data["middle_initial"] == "e"

    def test_parse_error(self, capsys):
        """Test the exit code for an unparseable name."""
        assert cli.main(["parse", "Prince"]) == cli.EXIT_PARSE_ERROR

    def test_bad_casing(self):
        """Test the exit code for an unknown casing policy."""
        assert cli.main(["parse", "John Smith", "--casing", "wavy"]) == cli.EXIT_CONFIG_ERROR


class TestResolveCommand:
    """Tests for `rollcall resolve`."""

    def test_resolve_json(self, users_csv, capsys):
        """Test resolving one name against a CSV export."""
        code = cli.main(["resolve", "Smith, John", "--backend", "csv", "--csv", str(users_csv)])
        assert code == cli.EXIT_OK

        items = json.loads(capsys.readouterr().out)
        assert items[0]["tier"] == "Exact"
        assert items[0]["results"][0]["account_name"] == "jsmith"

    def test_resolve_tier_filter(self, users_csv, capsys):
        """Test that --tier filters results but keeps the stopping tier."""
        cli.main(["resolve", "Jo Smith", "--csv", str(users_csv), "--tier", "exact"])
        items = json.loads(capsys.readouterr().out)
        assert items[0]["tier"] == "LastName"
        assert items[0]["match_count"] == 2
        assert items[0]["results"] == []

    def test_resolve_table(self, users_csv, capsys):
        """Test tabular output with ambiguous and missing names."""
        cli.main(["resolve", "Jo Smith", "Zed Zulu", "--csv", str(users_csv), "--format", "table"])
        out = capsys.readouterr().out
        assert "jasmith" in out
        assert "jsmith" in out
        assert "no match found" in out

    def test_batch_file(self, users_csv, tmp_path, capsys):
        """Test reading names from a CSV batch file."""
        batch = tmp_path / "names.csv"
        batch.write_text("name\nJohn Smith\nCher\nMaria Garcia\n")

        assert cli.main(["resolve", "--batch", str(batch), "--csv", str(users_csv)]) == cli.EXIT_OK
        items = json.loads(capsys.readouterr().out)
        assert [i["input"] for i in items] == ["John Smith", "Cher", "Maria Garcia"]
        assert "error" in items[1]

    def test_text_batch_file(self, users_csv, tmp_path):
        """Test one-name-per-line batch files, skipping blank lines."""
        batch = tmp_path / "names.txt"
        batch.write_text("John Smith\n\nMaria Garcia\n")
        assert cli.load_batch(batch) == ["John Smith", "Maria Garcia"]

    def test_single_unparseable_name(self, users_csv):
        """Test the exit code when the only name cannot be parsed."""
        assert cli.main(["resolve", "Cher", "--csv", str(users_csv)]) == cli.EXIT_PARSE_ERROR

    def test_missing_export(self, tmp_path):
        """Test the exit code when the directory cannot be opened."""
        code = cli.main(["resolve", "John Smith", "--csv", str(tmp_path / "missing.csv")])
        assert code == cli.EXIT_DIRECTORY_UNAVAILABLE

    def test_no_names(self, users_csv):
        """Test that resolve without names is a usage error."""
        assert cli.main(["resolve", "--csv", str(users_csv)]) == cli.EXIT_CONFIG_ERROR
