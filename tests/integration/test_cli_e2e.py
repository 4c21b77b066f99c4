"""
End-to-end tests for the command line interface.

Run the real parser with the packaged vocabulary through typer's test runner.
"""
import json
import pytest
from pathlib import Path
from typer.testing import CliRunner

from voice_tracker.cli import app

runner = CliRunner()

@pytest.fixture
def transcripts_file(tmp_path: Path) -> Path:
    path = tmp_path / "notes.txt"
    path.write_text(
        "beli nasi padang goceng kemarin\n"
        "\n"
        "dapat gaji 5 juta\n"
        "halo dunia\n",
        encoding="utf-8",
    )
    return path


@pytest.mark.integration
class TestParseCommand:

    def test_parse_to_json(self):
        # Act
        result = runner.invoke(app, ["parse", "dapat gaji 5 juta", "--today", "2025-03-10", "--json"])

        # Assert
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "direction": "income",
            "amount": "5000000",
            "category": "Gaji",
            "occurred_on": "2025-03-10",
            "note": "Gaji",
        }

    def test_parse_panel(self):
        result = runner.invoke(app, ["parse", "beli nasi padang goceng kemarin", "--today", "2025-03-10"])

        assert result.exit_code == 0, result.output
        assert "EXPENSE" in result.stdout
        assert "Rp 5.000" in result.stdout
        assert "Makanan & Minuman" in result.stdout
        assert "2025-03-09" in result.stdout
        assert "Nasi padang" in result.stdout

    def test_parse_without_amount(self):
        result = runner.invoke(app, ["parse", "halo dunia"])

        assert result.exit_code == 1
        assert "No amount found" in result.stdout
        assert "dapat gaji 5 juta" in result.stdout

    def test_parse_rejects_bad_date(self):
        result = runner.invoke(app, ["parse", "kopi 15 ribu", "--today", "10/03/2025"])

        assert result.exit_code != 0


@pytest.mark.integration
class TestParseFileCommand:

    def test_parse_file_summary(self, transcripts_file: Path):
        # Act
        result = runner.invoke(app, ["parse-file", str(transcripts_file), "--today", "2025-03-10"])

        # Assert
        assert result.exit_code == 0, result.output
        assert "Parsed 2 of 3 transcripts" in result.stdout
        assert "Rp 5.000.000" in result.stdout
        assert "halo dunia" in result.stdout

    def test_parse_file_to_json(self, transcripts_file: Path):
        result = runner.invoke(
            app, ["parse-file", str(transcripts_file), "--today", "2025-03-10", "--json"]
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert [t["note"] for t in payload["parsed"]] == ["Nasi padang", "Gaji"]
        assert payload["parsed"][0]["occurred_on"] == "2025-03-09"
        assert [f["transcript"] for f in payload["failed"]] == ["halo dunia"]

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["parse-file", str(tmp_path / "missing.txt")])

        assert result.exit_code != 0


@pytest.mark.integration
class TestCategoriesCommand:

    def test_income_categories(self):
        result = runner.invoke(app, ["categories", "--direction", "income"])

        assert result.exit_code == 0, result.output
        assert "Gaji" in result.stdout
        assert "Pemasukan Lain" in result.stdout
        assert "Transportasi" not in result.stdout

    def test_all_categories(self):
        result = runner.invoke(app, ["categories"])

        assert result.exit_code == 0, result.output
        assert "Transportasi" in result.stdout
        assert "Lainnya" in result.stdout
        assert "Investasi" in result.stdout

    def test_unknown_direction(self):
        result = runner.invoke(app, ["categories", "-d", "sideways"])

        assert result.exit_code == 1
        assert "Unknown direction" in result.stdout

    def test_verbose_shows_rule_chain(self):
        result = runner.invoke(app, ["--verbose", "categories", "-d", "expense"])

        assert result.exit_code == 0, result.output
        assert "KeywordRule" in result.stdout
        assert "DefaultRule" in result.stdout
