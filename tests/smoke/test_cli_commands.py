"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json

import pytest
from typer.testing import CliRunner

from src.cli.main import app
from src.db.database import session_scope
from src.db.repositories import SqlCatalogRepository, SqlHistoryRepository

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

runner = CliRunner()


@pytest.fixture
def seeded(sqlite_engine):
    result = runner.invoke(app, ["db", "seed"])
    assert result.exit_code == 0, result.output
    return result


class TestCLIHelp:
    def test_main_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "recommend" in result.output
        assert "stats" in result.output

    def test_db_help(self):
        result = runner.invoke(app, ["db", "--help"])

        assert result.exit_code == 0
        assert "seed" in result.output


class TestDatabaseCommands:
    def test_db_init(self, sqlite_engine):
        result = runner.invoke(app, ["db", "init"])

        assert result.exit_code == 0
        assert "Database initialized" in result.output

    def test_db_seed(self, seeded):
        assert "Seeded 9 modules" in seeded.output

    def test_db_seed_twice(self, seeded):
        result = runner.invoke(app, ["db", "seed"])

        assert result.exit_code == 0
        assert "already populated" in result.output


class TestLearnerCommands:
    def test_recommend_new_learner(self, seeded):
        result = runner.invoke(app, ["recommend", "newcomer"])

        assert result.exit_code == 0
        assert "easy" in result.output
        assert "Welcome" in result.output

    def test_recommend_json(self, seeded):
        result = runner.invoke(app, ["recommend", "newcomer", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["difficultyLevel"] == "easy"
        assert data["confidence"] == 0.5

    def test_profile_new_learner(self, seeded):
        result = runner.invoke(app, ["profile", "newcomer"])

        assert result.exit_code == 0
        assert "No activity recorded" in result.output

    def test_profile_and_stats_with_activity(self, seeded):
        with session_scope() as session:
            module = SqlCatalogRepository(session).find_entry_level_modules()[0]
            SqlHistoryRepository(session).record_activity("learner-1", 9, 10, 120, module_id=module.id)

        profile = runner.invoke(app, ["profile", "learner-1"])
        stats = runner.invoke(app, ["stats", "learner-1"])

        assert profile.exit_code == 0
        assert "90.0%" in profile.output
        assert stats.exit_code == 0
        assert "Attempts" in stats.output
