"""Tests for the TradeJournal command line interface."""

import sqlite3
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from tradejournal.cli.main import LAZY_SUBCOMMANDS, cli
from tradejournal.config import get_db_path, load_config
from tradejournal.db.store import JournalStore


@pytest.fixture(autouse=True)
def wide_terminal(monkeypatch):
    """Keep rich tables from wrapping or truncating columns."""
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point the config directory at a temporary folder."""
    monkeypatch.setenv("TRADEJOURNAL_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


def store_for(home) -> JournalStore:
    return JournalStore(get_db_path(load_config()))


class TestCommandRegistry:
    def test_all_lazy_commands_load(self, runner):
        for name in LAZY_SUBCOMMANDS:
            result = runner.invoke(cli, [name, "--help"])
            assert result.exit_code == 0, f"{name}: {result.output}"

    def test_range_help_lists_presets(self, runner):
        result = runner.invoke(cli, ["list", "--help"])

        for label in ("0-5", "5-10", "10-20", "20+"):
            assert label in result.output



class TestInit:
    def test_creates_config(self, runner, home):
        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 0
        assert (home / "config.toml").exists()
        assert get_db_path(load_config()) == home / "journal.db"

    def test_existing_config_kept(self, runner, home):
        runner.invoke(cli, ["init"])
        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 0
        assert "already exists" in result.output


class TestAddAndList:
    def test_add_taken_trade(self, runner, home):
        result = runner.invoke(cli, [
            "add", "--date", "2024-06-03", "--outcome", "tp",
            "--sl", "10", "--tp", "20", "--notes", "clean breakout",
        ])

        assert result.exit_code == 0, result.output
        records = store_for(home).get_trades()
        assert len(records) == 1
        assert records[0].outcome.value == "TP"
        assert records[0].direction.value == "LONG"
        assert "+2.00R" in result.output

    def test_add_no_trade_discards_directional_options(self, runner, home):
        result = runner.invoke(cli, [
            "add", "--date", "2024-06-05", "--outcome", "NO_TRADE", "--sl", "10",
        ])

        assert result.exit_code == 0, result.output
        assert "Ignoring --sl" in result.output
        record = store_for(home).get_trades()[0]
        assert getattr(record, "stop_loss_distance", None) is None

    def test_add_with_image(self, runner, home):
        image = home / "before.png"
        image.write_bytes(b"\x89PNG\r\n\x1a\n")

        result = runner.invoke(cli, [
            "add", "--date", "2024-06-03", "--outcome", "SL",
            "--image", f"before={image}",
        ])

        assert result.exit_code == 0, result.output
        record = store_for(home).get_trades()[0]
        assert list(record.attachments.values())[0].startswith("data:image/png;base64,")

    def test_add_rejects_bad_image_label(self, runner, home):
        image = home / "chart.png"
        image.write_bytes(b"\x89PNG")

        result = runner.invoke(cli, [
            "add", "--outcome", "SL", "--image", f"sideways={image}",
        ])

        assert result.exit_code != 0
        assert store_for(home).get_trades() == []

    def test_add_rejects_invalid_values(self, runner, home):
        result = runner.invoke(cli, ["add", "--outcome", "TP", "--sl", "-5"])

        assert result.exit_code == 1
        assert "Invalid Entry" in result.output
        assert store_for(home).get_trades() == []

    def test_list_filters(self, runner, home):
        runner.invoke(cli, ["add", "--date", "2024-06-03", "--outcome", "TP", "--range", "4"])
        runner.invoke(cli, ["add", "--date", "2024-06-04", "--outcome", "SL", "--range", "10"])

        result = runner.invoke(cli, ["list", "--range", "5-10"])

        assert result.exit_code == 0, result.output
        assert "No journal entries match" in result.output

        result = runner.invoke(cli, ["list", "--weekday", "1"])

        assert "2024-06-03" in result.output
        assert "2024-06-04" not in result.output

    def test_list_rejects_bad_range(self, runner, home):
        result = runner.invoke(cli, ["list", "--range", "wide"])

        assert result.exit_code != 0

    def test_delete_by_prefix(self, runner, home):
        runner.invoke(cli, ["add", "--date", "2024-06-03", "--outcome", "TP"])
        trade_id = store_for(home).get_trades()[0].id

        result = runner.invoke(cli, ["delete", trade_id[:8]])

        assert result.exit_code == 0, result.output
        assert "0 remaining" in result.output
        assert store_for(home).get_trades() == []

    def test_delete_unknown(self, runner, home):
        result = runner.invoke(cli, ["delete", "nope"])

        assert result.exit_code == 1
        assert "Not Found" in result.output


class TestCorruptDatabase:
    @pytest.fixture
    def corrupt_home(self, home):
        (home / "journal.db").write_bytes(b"not a sqlite database at all" * 100)
        return home

    def test_list_shows_empty_journal(self, runner, corrupt_home):
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0, result.output
        assert "No journal entries match" in result.output

    def test_add_reports_database_error(self, runner, corrupt_home):
        result = runner.invoke(cli, ["add", "--outcome", "TP"])

        assert result.exit_code == 1
        assert "Database Error" in result.output
        assert not isinstance(result.exception, sqlite3.DatabaseError)


class TestShow:
    def test_show_prints_every_field(self, runner, home):
        image = home / "before.png"
        image.write_bytes(b"\x89PNG\r\n\x1a\n")
        long_notes = "waited for the retest of the range high " * 3
        runner.invoke(cli, [
            "add", "--date", "2024-06-04", "--outcome", "SL", "--direction", "SHORT",
            "--sl", "12", "--time", "9:45", "--range", "6",
            "--sweep", "spike into the London open", "--notes", long_notes,
            "--image", f"before={image}",
        ])
        trade_id = store_for(home).get_trades()[0].id

        result = runner.invoke(cli, ["show", trade_id[:6]])

        assert result.exit_code == 0, result.output
        assert trade_id in result.output
        assert "Tuesday" in result.output
        assert "SHORT" in result.output
        assert "-1.00R" in result.output
        assert "spike into the London open" in result.output
        assert "waited for the retest" in result.output
        assert "Before" in result.output

    def test_show_no_trade_day(self, runner, home):
        runner.invoke(cli, ["add", "--date", "2024-06-05", "--outcome", "NO_TRADE"])
        trade_id = store_for(home).get_trades()[0].id

        result = runner.invoke(cli, ["show", trade_id])

        assert result.exit_code == 0, result.output
        assert "NO_TRADE" in result.output
        assert "Direction" not in result.output
        assert "No images" in result.output

    def test_save_images(self, runner, home):
        png = b"\x89PNG\r\n\x1a\nfake image body"
        image = home / "after.png"
        image.write_bytes(png)
        runner.invoke(cli, ["add", "--outcome", "TP", "--image", f"after={image}"])
        trade_id = store_for(home).get_trades()[0].id
        out_dir = home / "charts"

        result = runner.invoke(cli, ["show", trade_id, "--save-images", str(out_dir)])

        assert result.exit_code == 0, result.output
        saved = out_dir / f"{trade_id[:8]}-after.png"
        assert saved.read_bytes() == png

    def test_show_unknown(self, runner, home):
        result = runner.invoke(cli, ["show", "nope"])

        assert result.exit_code == 1
        assert "Not Found" in result.output


class TestStatistics:
    @pytest.fixture
    def journal(self, runner, home):
        runner.invoke(cli, ["add", "--date", "2024-06-03", "--outcome", "TP", "--sl", "10", "--tp", "20"])
        runner.invoke(cli, ["add", "--date", "2024-06-04", "--outcome", "SL"])
        runner.invoke(cli, ["add", "--date", "2024-06-05", "--outcome", "NO_TRADE"])
        return home

    def test_stats(self, runner, journal):
        result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 0, result.output
        assert "50.0%" in result.output
        assert "+1.00R" in result.output
        assert "+0.50R" in result.output
        assert "No Trade Days" in result.output

    def test_equity(self, runner, journal):
        result = runner.invoke(cli, ["equity"])

        assert result.exit_code == 0, result.output
        assert "Start" in result.output
        assert "+2.00R" in result.output

    @pytest.mark.parametrize("command", ["weekly", "daily", "weekdays"])
    def test_series_commands(self, runner, journal, command):
        result = runner.invoke(cli, [command])

        assert result.exit_code == 0, result.output

    def test_stats_on_empty_journal(self, runner, home):
        result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 0, result.output
        assert "0.0%" in result.output


class TestAiCommands:
    def test_ask_without_key_is_config_error(self, runner, home, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with patch("tradejournal.agents.analyst.run_agent_sync") as mock_run:
            result = runner.invoke(cli, ["ask", "How am I doing?"])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output
        mock_run.assert_not_called()

    def test_ask(self, runner, home, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch("tradejournal.agents.analyst.run_agent_sync", return_value="Keep going"):
            result = runner.invoke(cli, ["ask", "How am I doing?"])

        assert result.exit_code == 0, result.output
        assert "Keep going" in result.output

    def test_sweeps_not_enough_notes(self, runner, home, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        runner.invoke(cli, ["add", "--outcome", "SL", "--sweep", "wick"])

        with patch("tradejournal.agents.analyst.run_agent_sync") as mock_run:
            result = runner.invoke(cli, ["sweeps"])

        assert result.exit_code == 0, result.output
        assert "enough" in result.output
        mock_run.assert_not_called()
