"""
End-to-end tests for the migration runner and the command-line entry point.
"""

import sqlite3
from datetime import datetime
from unittest.mock import patch

import pytest

from owner_migration.cli import format_summary, main
from owner_migration.core.config import MigrationError, MigrationSettings
from owner_migration.core.results import MigrationResult, MigrationSummary, Outcome, Phase
from owner_migration.core.runner import run_migration


@pytest.fixture
def app_root(tmp_path):
    """A server checkout holding a database, one old session and one user folder."""
    data = tmp_path / "data"
    data.mkdir()

    conn = sqlite3.connect(data / "database.sqlite")
    conn.execute('CREATE TABLE "groups" (id INTEGER PRIMARY KEY, userId TEXT)')
    conn.executemany('INSERT INTO "groups" (userId) VALUES (?)', [("alice",), ("bob",), ("owner",)])
    conn.execute("CREATE TABLE crm_contacts (id INTEGER PRIMARY KEY, userId TEXT, phone TEXT)")
    conn.execute("INSERT INTO crm_contacts (userId, phone) VALUES ('alice', '555')")
    conn.commit()
    conn.close()

    (tmp_path / ".wwebjs_auth" / "session-alice").mkdir(parents=True)
    (data / "alice").mkdir()
    (data / "alice" / "autoreplies.json").write_text("[]")
    return tmp_path


@pytest.fixture
def settings(app_root):
    return MigrationSettings(
        db_path=app_root / "data" / "database.sqlite",
        session_dir=app_root / ".wwebjs_auth",
        data_dir=app_root / "data",
    )


class TestRunMigration:

    def test_full_run(self, app_root, settings):
        summary = run_migration(settings)

        assert summary.completed_at is not None
        assert summary.rows_changed == 3
        assert summary.sessions_renamed == 1
        assert summary.files_copied == 1
        assert (app_root / ".wwebjs_auth" / "session-owner").is_dir()
        assert (app_root / "data" / "owner" / "autoreplies.json").exists()

        failed = {r.name for r in summary.for_phase(Phase.DATABASE) if r.outcome == Outcome.FAILED}
        assert failed == {"autoreplies", "templates", "schedules", "commands", "settings", "crm_sequences"}

    def test_rerun_is_idempotent(self, settings):
        run_migration(settings)
        second = run_migration(settings)

        assert second.rows_changed == 0
        assert second.sessions_renamed == 0
        assert second.files_copied == 0
        assert second.notes["sessions"] == "nothing to migrate"

    def test_rerun_reports_success_when_all_tables_exist(self, settings):
        """Data entries already copied to the owner folder are not warnings."""
        settings = settings.model_copy(update={"tables": ("groups", "crm_contacts")})

        run_migration(settings)
        second = run_migration(settings)

        assert [r.outcome for r in second.for_phase(Phase.USER_DATA)] == [Outcome.NOOP]
        assert second.warnings == []
        assert "Status: SUCCESS" in format_summary(second)

    def test_missing_session_dir_noted(self, app_root, settings):
        (app_root / ".wwebjs_auth" / "session-alice").rmdir()
        (app_root / ".wwebjs_auth").rmdir()

        summary = run_migration(settings)

        assert summary.for_phase(Phase.SESSIONS) == []
        assert "not found" in summary.notes["sessions"]
        assert not (app_root / ".wwebjs_auth").exists()

    def test_missing_database_aborts_before_filesystem_work(self, app_root, settings):
        (app_root / "data" / "database.sqlite").unlink()

        with pytest.raises(MigrationError):
            run_migration(settings)

        assert (app_root / ".wwebjs_auth" / "session-alice").exists()
        assert not (app_root / "data" / "owner").exists()


class TestSummary:

    def test_counters_and_serialization(self):
        summary = MigrationSummary(
            started_at=datetime(2025, 1, 1, 12, 0, 0),
            completed_at=datetime(2025, 1, 1, 12, 0, 1),
            results=[
                MigrationResult.migrated(Phase.DATABASE, "groups", changed=4, found=["alice"]),
                MigrationResult.noop(Phase.DATABASE, "templates"),
                MigrationResult.failed(Phase.DATABASE, "settings", "no such table: settings"),
                MigrationResult.skipped(Phase.SESSIONS, "session-bob", "session-owner already exists"),
            ],
        )

        assert summary.rows_changed == 4
        assert summary.sessions_renamed == 0
        assert len(summary.warnings) == 2

        data = summary.to_dict()
        assert data["rows_changed"] == 4
        assert data["warnings"] == 2
        assert data["results"][0]["found"] == ["alice"]
        assert data["results"][2]["outcome"] == "failed"
        assert "completed_at" in data

    def test_format_summary(self):
        summary = MigrationSummary(
            started_at=datetime(2025, 1, 1, 12, 0, 0),
            completed_at=datetime(2025, 1, 1, 12, 0, 2),
            results=[
                MigrationResult.migrated(Phase.DATABASE, "groups", changed=2),
                MigrationResult.failed(Phase.DATABASE, "settings", "no such table: settings"),
            ],
            notes={"sessions": "/srv/app/.wwebjs_auth not found"},
        )

        text = format_summary(summary)

        assert "Status: COMPLETED WITH WARNINGS (1 warning)" in text
        assert "groups: migrated 2 row(s)" in text
        assert "settings: failed (no such table: settings)" in text
        assert "/srv/app/.wwebjs_auth not found" in text


class TestMain:

    def test_main_success(self, settings, capsys):
        with patch("owner_migration.cli.load_settings", return_value=settings):
            assert main([]) == 0

        out = capsys.readouterr().out
        assert "Migration complete" in out
        assert "Rows Changed: 3" in out

    def test_main_missing_database(self, settings, capsys):
        settings.db_path.unlink()

        with patch("owner_migration.cli.load_settings", return_value=settings):
            assert main([]) == 1

        assert "Migration failed" in capsys.readouterr().out

    @patch('owner_migration.core.config.APP_ROOT', None)
    @patch('owner_migration.core.config.DB_PATH', './data/database.sqlite')
    @patch('owner_migration.core.config.SESSION_DIR', './.wwebjs_auth')
    @patch('owner_migration.core.config.DATA_DIR', './data')
    def test_main_passes_project_root(self, app_root, capsys):
        """The checkout script resolves paths against its own project root."""
        assert main([], project_root=app_root) == 0
        assert (app_root / ".wwebjs_auth" / "session-owner").is_dir()

    @patch('owner_migration.core.config.APP_ROOT', None)
    @patch('owner_migration.core.config.DB_PATH', './data/database.sqlite')
    @patch('owner_migration.core.config.SESSION_DIR', './.wwebjs_auth')
    @patch('owner_migration.core.config.DATA_DIR', './data')
    def test_console_script_uses_working_directory(self, app_root, monkeypatch, capsys):
        monkeypatch.chdir(app_root)

        assert main([]) == 0
        assert "Rows Changed: 3" in capsys.readouterr().out

    def test_main_unexpected_error(self, settings):
        with patch("owner_migration.cli.load_settings", return_value=settings), \
             patch("owner_migration.cli.run_migration", side_effect=PermissionError("denied")):
            assert main([]) == 2
