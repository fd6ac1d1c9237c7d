"""Database phase: reassign every tenant-scoped row to the owner."""

import sqlite3
from typing import List

from util.logging import get_logger

from .config import MigrationSettings
from .db import distinct_tenants, reassign_to_owner
from .results import MigrationResult, Phase

logger = get_logger(__name__)


def migrate_table(conn: sqlite3.Connection, table: str, settings: MigrationSettings) -> MigrationResult:
    """Migrate one table; database errors are reported, never raised."""
    found: List[str] = []
    try:
        found = distinct_tenants(conn, table, settings.tenant_column, settings.owner_id)
        if not found:
            logger.info(f"{table}: No migration needed")
            logger.log_table_migration(table, "noop")
            return MigrationResult.noop(Phase.DATABASE, table)

        logger.info(f"{table}: Found {len(found)} old userId(s): {', '.join(found)}")
        changed = reassign_to_owner(conn, table, settings.tenant_column, settings.owner_id)
        logger.info(f"✅ {table}: Migrated {changed} row(s) to '{settings.owner_id}'")
        logger.log_table_migration(table, "migrated", changed=changed, found=found)
        return MigrationResult.migrated(Phase.DATABASE, table, changed=changed, found=found)

    except sqlite3.Error as e:
        logger.warning(f"⚠️  {table}: {e}")
        logger.log_table_migration(table, "failed", found=found, error=str(e))
        return MigrationResult.failed(Phase.DATABASE, table, str(e), found=found)


def migrate_tables(conn: sqlite3.Connection, settings: MigrationSettings) -> List[MigrationResult]:
    """Run migrate_table over the configured tables, strictly in order."""
    return [migrate_table(conn, table, settings) for table in settings.tables]
