"""Command-line entry point for the owner migration."""

import argparse
import sys

from .core.config import MigrationError, load_settings
from .core.results import MigrationSummary, Outcome, Phase
from .core.runner import run_migration

_PHASE_TITLES = {
    Phase.DATABASE: "Database tables",
    Phase.SESSIONS: "WhatsApp session",
    Phase.USER_DATA: "User data folders",
}


def format_summary(summary: MigrationSummary) -> str:
    """Format a run summary for display."""
    lines = []

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        lines.append(f"Duration: {duration.total_seconds():.2f} seconds")

    if summary.warnings:
        count = len(summary.warnings)
        lines.append(f"Status: COMPLETED WITH WARNINGS ({count} warning{'' if count == 1 else 's'})")
    else:
        lines.append("Status: SUCCESS")

    lines.append(f"Rows Changed: {summary.rows_changed}")
    lines.append(f"Sessions Renamed: {summary.sessions_renamed}")
    lines.append(f"Files Copied: {summary.files_copied}")

    for phase, title in _PHASE_TITLES.items():
        lines.append(f"{title}:")
        results = summary.for_phase(phase)
        if not results:
            lines.append(f"  - {summary.notes.get(phase.value, 'nothing to migrate')}")
            continue
        for result in results:
            if result.outcome == Outcome.MIGRATED and phase == Phase.DATABASE:
                lines.append(f"  - {result.name}: migrated {result.changed} row(s)")
            elif result.detail:
                lines.append(f"  - {result.name}: {result.outcome.value} ({result.detail})")
            else:
                lines.append(f"  - {result.name}: {result.outcome.value}")

    return "\n".join(lines)


def main(argv=None, project_root=None):
    parser = argparse.ArgumentParser(
        description="Migrate all tenant data and the WhatsApp session to the 'owner' user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Every row of the tenant tables is reassigned to userId='owner', the first
.wwebjs_auth/session-<id> folder is renamed to session-owner, and the first
legacy data/<user> folder is copied into data/owner. Safe to run again.

Environment variables:
- DB_PATH (default ./data/database.sqlite)
- DATA_DIR (default ./data)
- SESSION_DIR (default ./.wwebjs_auth)
- APP_ROOT (directory relative paths resolve against, default: working directory)
- LOG_LEVEL (default INFO)
        """
    )
    parser.parse_args(argv)

    print("🔄 Starting migration to owner userId...")

    try:
        settings = load_settings(fallback_root=project_root)
        summary = run_migration(settings)
    except MigrationError as e:
        print(f"❌ Migration failed: {e}")
        return 1
    except Exception as e:
        print(f"❌ Migration error: {e}")
        return 2

    print()
    print(format_summary(summary))
    print()
    print("✅ Migration complete! Restart your server: pm2 restart all")
    return 0


if __name__ == "__main__":
    sys.exit(main())
