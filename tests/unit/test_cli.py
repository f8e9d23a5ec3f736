"""Tests for the Typer CLI."""

from pathlib import Path

import sys

import pytest
from typer.testing import CliRunner

from nda_search import __version__
from nda_search.cli.app import app
from nda_search.cli.shortcuts import element_main
from nda_search.exceptions import InvalidArgumentError, InvalidQueryError
from nda_search.search.models import Element
from nda_search.service.mock import MockDataDictionaryClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def patched_client(
    config_file: Path,
    mock_client: MockDataDictionaryClient,
    monkeypatch: pytest.MonkeyPatch,
) -> MockDataDictionaryClient:
    """Serve every CLI command from the mock catalog."""
    monkeypatch.setattr(sys.modules["nda_search.cli.app"], "create_client", lambda config=None: mock_client)
    return mock_client


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"nda-search version {__version__}" in result.output


class TestElementCommand:
    """Tests for ``nda-search element``."""

    def test_exact_hit(self) -> None:
        result = runner.invoke(app, ["element", "subjectkey"])

        assert result.exit_code == 0
        assert "subjectkey" in result.output
        assert "type: GUID" in result.output

    def test_partial_result(self) -> None:
        result = runner.invoke(app, ["element", "interview"])

        assert result.exit_code == 0
        assert '2 elements matching "interview"' in result.output
        assert "interview_date" in result.output

    def test_pick(self) -> None:
        result = runner.invoke(app, ["element", "interview", "--pick", "1"])

        assert result.exit_code == 0
        assert "description: " in result.output

    def test_pick_out_of_range(self) -> None:
        result = runner.invoke(app, ["element", "interview", "-n", "9"])

        assert result.exit_code == InvalidArgumentError.exit_code
        assert "out of range" in result.output

    def test_no_match_exits_zero(self) -> None:
        result = runner.invoke(app, ["element", "nonexistentzzz"])

        assert result.exit_code == 0
        assert 'No data elements found matching "nonexistentzzz"' in result.output

    def test_failed_search(
        self, catalog: dict[str, list[Element]], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        failing = MockDataDictionaryClient(catalog, fail_structure_search=True)
        monkeypatch.setattr(sys.modules["nda_search.cli.app"], "create_client", lambda config=None: failing)

        result = runner.invoke(app, ["element", "interview"])

        assert result.exit_code == 1
        assert "Error fetching data structures" in result.output

    def test_empty_query(self) -> None:
        result = runner.invoke(app, ["element", "  "])
        assert result.exit_code == InvalidQueryError.exit_code

    def test_json_format(self) -> None:
        result = runner.invoke(app, ["element", "subjectkey", "--format", "json"])

        assert result.exit_code == 0
        assert '"type": "GUID"' in result.output


class TestHistoryCommands:
    """Tests for ``nda-search history``."""

    def test_search_is_recorded(self) -> None:
        runner.invoke(app, ["element", "subjectkey"])
        runner.invoke(app, ["element", "interview"])

        result = runner.invoke(app, ["history", "list"])

        assert result.exit_code == 0
        lines = [line.split() for line in result.output.splitlines() if line.strip()]
        assert lines == [["1", "interview"], ["2", "subjectkey"]]

    def test_no_history_flag(self) -> None:
        runner.invoke(app, ["element", "subjectkey", "--no-history"])

        result = runner.invoke(app, ["history", "list"])

        assert "No recent searches" in result.output

    def test_failed_search_not_recorded(
        self, catalog: dict[str, list[Element]], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        failing = MockDataDictionaryClient(catalog, fail_structure_search=True)
        monkeypatch.setattr(sys.modules["nda_search.cli.app"], "create_client", lambda config=None: failing)
        runner.invoke(app, ["element", "interview"])

        result = runner.invoke(app, ["history", "list"])

        assert "No recent searches" in result.output

    def test_remove(self) -> None:
        runner.invoke(app, ["element", "subjectkey"])

        removed = runner.invoke(app, ["history", "remove", "subjectkey"])
        missing = runner.invoke(app, ["history", "remove", "subjectkey"])

        assert "Removed subjectkey from history" in removed.output
        assert "not in history" in missing.output

    def test_clear(self) -> None:
        runner.invoke(app, ["element", "subjectkey"])
        runner.invoke(app, ["element", "interview"])

        result = runner.invoke(app, ["history", "clear", "--force"])

        assert result.exit_code == 0
        assert "Cleared 2 history entries" in result.output
        assert "No recent searches" in runner.invoke(app, ["history", "list"]).output

    def test_clear_cancelled(self) -> None:
        runner.invoke(app, ["element", "subjectkey"])

        result = runner.invoke(app, ["history", "clear"], input="n\n")

        assert "Cancelled" in result.output
        assert "subjectkey" in runner.invoke(app, ["history", "list"]).output

    def test_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NDA_SEARCH_NO_HISTORY", "1")

        result = runner.invoke(app, ["history", "list"])

        assert "Search history is disabled" in result.output


class TestStructureCommands:
    """Tests for structure and full-text commands."""

    def test_structures_category(self) -> None:
        result = runner.invoke(app, ["structures", "category:Imaging"])

        assert result.exit_code == 0
        assert 'Category "Imaging" (1)' in result.output
        assert "demo02" in result.output

    def test_structures_keyword(self) -> None:
        result = runner.invoke(app, ["structures", "tap"])

        assert result.exit_code == 0
        assert '3 structures matching "tap"' in result.output

    def test_structures_empty(self) -> None:
        result = runner.invoke(app, ["structures", "nothing"])
        assert 'No data structures found for "nothing"' in result.output

    def test_structure(self) -> None:
        result = runner.invoke(app, ["structure", "fingertap01"])

        assert result.exit_code == 0
        assert "fingertap01 (2 elements)" in result.output
        assert "tapping_rate" in result.output

    def test_unknown_structure(self) -> None:
        result = runner.invoke(app, ["structure", "missing01"])
        assert result.exit_code == 4

    def test_fulltext(self) -> None:
        result = runner.invoke(app, ["fulltext", "tap", "--size", "5"])

        assert result.exit_code == 0
        assert 'full-text hits for "tap"' in result.output
        assert "tap_count" in result.output


class TestConfigCommand:
    """Tests for ``nda-search config``."""

    def test_path(self, config_file: Path) -> None:
        result = runner.invoke(app, ["config", "--path"])

        assert result.exit_code == 0
        assert result.output.strip() == str(config_file)

    def test_show(self) -> None:
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Batch size: 10" in result.output
        assert "Supplementary categories: Imaging" in result.output
        assert "element (el, search)" in result.output


class TestShortcuts:
    """Tests for the ``nda-element`` entry point."""

    def test_element_main(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("sys.argv", ["nda-element", "subjectkey"])

        with pytest.raises(SystemExit) as exc_info:
            element_main()

        assert exc_info.value.code == 0
        assert "type: GUID" in capsys.readouterr().out
