"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
from datetime import UTC, datetime

import pytest
from typer.testing import CliRunner

from skillroute.cli import main as cli_main
from skillroute.cli.main import app
from skillroute.config import get_settings
from skillroute.db.database import get_engine, make_session_factory, session_scope
from skillroute.db.models import ReviewItemRecord
from skillroute.db.repository import ReviewItemRepository

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_database(tmp_path, monkeypatch):
    """Point the CLI at a throwaway SQLite file."""
    monkeypatch.setenv("SKILLROUTE_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    get_settings.cache_clear()
    get_engine.cache_clear()
    # Wide console so table cells are not truncated
    monkeypatch.setattr(cli_main.console, "width", 200)
    yield
    get_engine().dispose()
    get_settings.cache_clear()
    get_engine.cache_clear()


@pytest.fixture
def initialized():
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0, result.output


def _items(user):
    return ReviewItemRepository(make_session_factory(get_engine())).list_for_user(user)


class TestCLIHelp:
    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("init-db", "enroll", "answer", "due", "stats", "skills", "diagnostic"):
            assert command in result.output


class TestReviewCommands:
    def test_init_db(self):
        result = runner.invoke(app, ["init-db"])
        assert result.exit_code == 0
        assert "Database initialized" in result.output

    def test_enroll_then_due(self, initialized):
        result = runner.invoke(app, ["enroll", "ana", "python", "loops", "q1"])
        assert result.exit_code == 0, result.output
        assert "Enrolled" in result.output

        result = runner.invoke(app, ["due", "ana"])
        assert result.exit_code == 0, result.output
        assert "loops" in result.output

    def test_answer(self, initialized):
        runner.invoke(app, ["enroll", "ana", "python", "loops", "q1"])
        (item,) = _items("ana")

        result = runner.invoke(app, ["answer", item.id, "--correct", "--time-ms", "1000"])
        assert result.exit_code == 0, result.output
        assert "Quality" in result.output
        assert _items("ana")[0].repetitions == 1

    def test_answer_missing_item(self, initialized):
        result = runner.invoke(app, ["answer", "no-such-item", "--incorrect"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_answer_malformed_item(self, initialized):
        with session_scope(make_session_factory(get_engine())) as session:
            session.add(
                ReviewItemRecord(
                    id="broken",
                    user_id="ana",
                    roadmap_id="python",
                    node_id="loops",
                    easiness_factor=0.2,
                    interval=1,
                    repetitions=0,
                    next_review_at=datetime(2025, 3, 1, tzinfo=UTC),
                )
            )

        result = runner.invoke(app, ["answer", "broken", "--correct"])
        assert result.exit_code == 1
        assert "malformed" in result.output

    def test_empty_queue(self, initialized):
        result = runner.invoke(app, ["due", "nobody"])
        assert result.exit_code == 0
        assert "Nothing due" in result.output

    def test_stats_and_skills(self, initialized):
        runner.invoke(app, ["enroll", "ana", "python", "loops", "q1"])

        result = runner.invoke(app, ["stats", "ana"])
        assert result.exit_code == 0, result.output
        assert "Retention" in result.output

        result = runner.invoke(app, ["skills", "ana", "--roadmap", "python"])
        assert result.exit_code == 0, result.output
        assert "Untested" in result.output


class TestDiagnosticCommand:
    def test_seeded_diagnostic(self, tmp_path):
        bank = tmp_path / "bank.json"
        bank.write_text(
            json.dumps(
                [
                    {"id": "q1", "roadmapId": "python", "nodeId": "loops", "correctAnswer": "a"},
                    {"id": "q2", "roadmapId": "python", "nodeId": "funcs", "correctAnswer": "b"},
                ]
            )
        )

        result = runner.invoke(app, ["diagnostic", str(bank), "python", "--count", "2", "--seed", "7"])
        assert result.exit_code == 0, result.output
        assert "q1" in result.output
        assert "q2" in result.output

    def test_unknown_roadmap(self, tmp_path):
        bank = tmp_path / "bank.json"
        bank.write_text("[]")

        result = runner.invoke(app, ["diagnostic", str(bank), "rust"])
        assert result.exit_code == 0
        assert "No questions" in result.output
