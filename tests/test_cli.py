"""Tests for the disciplog command line.

**Feature: discipline-tracking**
"""

import json
import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner

from disciplog.cli.main import LAZY_SUBCOMMANDS, cli
from disciplog.db.store import DataStore


@pytest.fixture
def home():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def run(home: Path):
    runner = CliRunner()

    def invoke(*args: str, input: str | None = None):
        return runner.invoke(cli, list(args), input=input, env={"DISCIPLOG_HOME": str(home)})

    return invoke


def start_session(run, max_trades: int = 3):
    return run(
        "session", "start",
        "--sleep", "4", "--stress", "2", "--focus", "4",
        "--max-trades", str(max_trades), "--rules-confirmed",
    )


class TestLazyCommands:
    """
    **Feature: discipline-tracking, Property 27: Lazy Command Loading**

    Every registered command name resolves to a click command.
    """

    @pytest.mark.parametrize("name", sorted(LAZY_SUBCOMMANDS))
    def test_command_loads(self, run, name):
        result = run(name, "--help")

        assert result.exit_code == 0, result.output

    def test_unknown_command(self, run):
        result = run("nope")

        assert result.exit_code != 0


class TestInitAndRules:
    """
    **Feature: discipline-tracking, Property 28: Rule Commands**
    """

    def test_init_creates_config_and_db(self, run, home: Path):
        result = run("init", "--name", "Sam")

        assert result.exit_code == 0, result.output
        assert (home / "config.toml").exists()
        assert (home / "disciplog.db").exists()

    def test_add_list_toggle_delete(self, run, home: Path):
        result = run("rule", "add", "Risk max 1% per trade", "--category", "risk")
        assert result.exit_code == 0, result.output

        rule = DataStore(home / "disciplog.db").get_rules("local")[0]

        result = run("rule", "list")
        assert result.exit_code == 0
        assert rule.id[:8] in result.output

        result = run("rule", "toggle", rule.id[:8])
        assert result.exit_code == 0
        assert "deactivated" in result.output

        result = run("rule", "delete", rule.id[:8], "--yes")
        assert result.exit_code == 0
        assert DataStore(home / "disciplog.db").get_rules("local") == []

    def test_invalid_category(self, run):
        result = run("rule", "add", "Something", "--category", "luck")

        assert result.exit_code == 2

    def test_unknown_rule_id(self, run):
        result = run("rule", "toggle", "deadbeef")

        assert result.exit_code == 1


class TestSessionCommands:
    """
    **Feature: discipline-tracking, Property 29: Session Workflow**

    Starting a session, logging trades and ending it stores the score.
    """

    def test_full_session(self, run, home: Path):
        run("rule", "add", "Wait for the setup", "--category", "entry")
        store = DataStore(home / "disciplog.db")
        rule_id = store.get_rules("local")[0].id

        result = start_session(run, max_trades=2)
        assert result.exit_code == 0, result.output

        result = run("session", "trade", "win", "100")
        assert result.exit_code == 0, result.output
        assert "Trade #1 logged" in result.output

        result = run("session", "trade", "loss", "50", "--emotion", "fomo", "--broke", rule_id[:8])
        assert result.exit_code == 0, result.output

        result = run("session", "trade", "win", "10")
        assert result.exit_code == 1
        assert "Max Trades" in result.output

        result = run("session", "show")
        assert result.exit_code == 0, result.output
        assert "Rules followed: 50%" in result.output

        result = run("session", "end", "--plan", "4", "--emotional", "5")
        assert result.exit_code == 0, result.output

        session = store.get_sessions("local")[0]
        trades = store.get_trades(session.id)
        assert session.discipline_score == 80
        assert [t.pnl for t in trades] == [100.0, -50.0]

    def test_second_start_rejected(self, run):
        assert start_session(run).exit_code == 0

        result = start_session(run)

        assert result.exit_code == 1

    def test_trade_without_session(self, run):
        result = run("session", "trade", "win", "10")

        assert result.exit_code == 1
        assert "No active session" in result.output

    def test_trade_requires_pnl(self, run):
        start_session(run)

        assert run("session", "trade", "win").exit_code == 1
        assert run("session", "trade", "breakeven").exit_code == 0

    @pytest.mark.parametrize("pnl", ["nan", "inf"])
    def test_non_finite_pnl_rejected(self, run, home: Path, pnl):
        start_session(run)

        result = run("session", "trade", "win", pnl)

        assert result.exit_code == 1
        assert "Cannot log trade" in result.output
        store = DataStore(home / "disciplog.db")
        assert store.get_trades(store.get_active_session("local").id) == []

    def test_undo_last_trade(self, run, home: Path):
        start_session(run)
        run("session", "trade", "win", "10")
        run("session", "trade", "win", "20")

        result = run("session", "undo")

        assert result.exit_code == 0, result.output
        assert "#2" in result.output
        store = DataStore(home / "disciplog.db")
        active = store.get_active_session("local")
        assert [t.trade_number for t in store.get_trades(active.id)] == [1]

    def test_sleep_hours_converted(self, run, home: Path):
        result = run(
            "session", "start", "--sleep-hours", "6.5", "--stress", "1", "--focus", "5",
            "--max-trades", "4", "--rules-not-confirmed",
        )

        assert result.exit_code == 0, result.output
        active = DataStore(home / "disciplog.db").get_active_session("local")
        assert active.pre_session.sleep_rating == 3
        assert active.pre_session.rules_confirmed is False


class TestDashboardCommands:
    """
    **Feature: discipline-tracking, Property 30: Dashboard Output**
    """

    def test_empty_dashboard(self, run):
        result = run("dashboard")

        assert result.exit_code == 0, result.output
        assert "No completed sessions" in result.output

    def test_dashboard_json(self, run):
        start_session(run)
        run("session", "trade", "win", "100", "--emotion", "confident")
        run("session", "end", "--plan", "5", "--emotional", "5")

        result = run("dashboard", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_sessions"] == 1
        assert data["latest_score"] == 100
        assert data["streak"] == 1
        assert data["emotion_distribution"] == {"confident": 1}
        assert data["broken_rules"] == {}

    def test_dashboard_table(self, run):
        start_session(run)
        run("session", "trade", "win", "100")
        run("session", "end", "--plan", "5", "--emotional", "5")

        result = run("dashboard", "--window", "all")

        assert result.exit_code == 0, result.output
        assert "Discipline" in result.output
        assert "Change" in result.output

    def test_dashboard_lists_broken_rules(self, run, home: Path):
        run("rule", "add", "Stop", "--category", "risk")
        rule_id = DataStore(home / "disciplog.db").get_rules("local")[0].id
        start_session(run)
        run("session", "trade", "loss", "20", "--broke", rule_id[:8])
        run("session", "end", "--plan", "2", "--emotional", "2")

        result = run("dashboard", "--window", "all")

        assert result.exit_code == 0, result.output
        assert "Times" in result.output
        assert "Stop" in result.output

    def test_history_json(self, run):
        start_session(run)
        run("session", "trade", "loss", "30")
        run("session", "end", "--plan", "3", "--emotional", "3")

        result = run("history", "--json")

        assert result.exit_code == 0, result.output
        groups = json.loads(result.output)
        assert len(groups) == 1
        assert groups[0]["total_pnl"] == -30.0
        assert groups[0]["sessions"][0]["trade_stats"]["losses"] == 1


class TestJournalCommands:
    """
    **Feature: discipline-tracking, Property 31: Journal Commands**
    """

    def test_add_list_show_delete(self, run, home: Path):
        result = run("journal", "add", "Chased the open", "--content", "Entered too early",
                     "--date", "2026-10-01")
        assert result.exit_code == 0, result.output

        entry = DataStore(home / "disciplog.db").get_journal_entries("local")[0]

        result = run("journal", "list")
        assert result.exit_code == 0
        assert "Chased the open" in result.output

        result = run("journal", "show", entry.id[:8])
        assert result.exit_code == 0
        assert "Entered too early" in result.output

        result = run("journal", "edit", entry.id[:8], "--title", "Chased the open again")
        assert result.exit_code == 0, result.output

        result = run("journal", "delete", entry.id[:8], "--yes")
        assert result.exit_code == 0
        assert DataStore(home / "disciplog.db").get_journal_entries("local") == []

    def test_invalid_date(self, run):
        result = run("journal", "add", "Title", "--date", "01/10/2026")

        assert result.exit_code == 1
