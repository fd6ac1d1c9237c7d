"""
Migration runner.

Runs the database, session-directory and user-data phases in that order over
one exclusively owned SQLite connection. Per-item problems end up in the
summary; anything else (no database, a failed rename or copy) propagates.
"""

from datetime import datetime
from typing import Optional

from util.logging import get_logger

from .config import MigrationSettings, load_settings
from .db import get_db
from .results import MigrationSummary, Phase
from .sessions import migrate_sessions
from .tables import migrate_tables
from .user_data import migrate_user_data

logger = get_logger(__name__)


def _note_empty_phase(summary: MigrationSummary, phase: Phase, location_exists: bool, location):
    if summary.for_phase(phase):
        return
    if location_exists:
        summary.notes[phase.value] = "nothing to migrate"
    else:
        summary.notes[phase.value] = f"{location} not found"


def run_migration(settings: Optional[MigrationSettings] = None) -> MigrationSummary:
    """Collapse every tenant onto the owner and return what was done."""
    if settings is None:
        settings = load_settings()

    summary = MigrationSummary(started_at=datetime.now())
    logger.log_operation("owner_migration", "started", {
        "db_path": settings.db_path,
        "session_dir": settings.session_dir,
        "data_dir": settings.data_dir,
    })

    with get_db(settings.db_path) as conn:
        logger.info("📊 Migrating database tables...")
        summary.results.extend(migrate_tables(conn, settings))

        logger.info("📱 Migrating WhatsApp session...")
        session_dir_exists = settings.session_dir.is_dir()
        summary.results.extend(migrate_sessions(settings))
        _note_empty_phase(summary, Phase.SESSIONS, session_dir_exists, settings.session_dir)

        logger.info("📁 Migrating user data folders...")
        data_dir_exists = settings.data_dir.is_dir()
        summary.results.extend(migrate_user_data(settings))
        _note_empty_phase(summary, Phase.USER_DATA, data_dir_exists, settings.data_dir)

    summary.completed_at = datetime.now()
    duration_ms = (summary.completed_at - summary.started_at).total_seconds() * 1000
    logger.log_operation("owner_migration", "success", {
        "rows_changed": summary.rows_changed,
        "sessions_renamed": summary.sessions_renamed,
        "files_copied": summary.files_copied,
        "warnings": len(summary.warnings),
        "duration_ms": f"{duration_ms:.2f}",
    })
    return summary
