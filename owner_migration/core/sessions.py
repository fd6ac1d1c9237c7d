"""
Session-directory phase.

WhatsApp client sessions live in <SESSION_DIR>/session-<id>. The first
non-owner session found is renamed to session-owner; once that exists every
other candidate is left where it is.
"""

import os
from pathlib import Path
from typing import List

from util.logging import get_logger

from .config import SESSION_PREFIX, MigrationSettings
from .results import MigrationResult, Phase

logger = get_logger(__name__)


def find_session_candidates(session_dir: Path, owner_session: str) -> List[str]:
    """Entries named session-* other than the owner's, in listing order."""
    return [
        name for name in os.listdir(session_dir)
        if name.startswith(SESSION_PREFIX) and name != owner_session
    ]


def migrate_sessions(settings: MigrationSettings) -> List[MigrationResult]:
    session_dir = settings.session_dir
    owner_session = settings.owner_session_name

    if not session_dir.is_dir():
        logger.info(f"No {session_dir.name} folder found")
        return []

    candidates = find_session_candidates(session_dir, owner_session)
    if not candidates:
        logger.info("No session folders to migrate")
        return []

    results = []
    target = session_dir / owner_session
    for name in candidates:
        source = session_dir / name

        # lexists: a dangling session-owner symlink still blocks the rename
        if os.path.lexists(target):
            reason = f"{owner_session} already exists"
            logger.warning(f"⚠️  {reason}, skipping {name}")
            logger.log_path_migration("session_rename", str(source), str(target), "skipped", reason)
            results.append(MigrationResult.skipped(Phase.SESSIONS, name, reason))
            continue

        # OSError other than the guarded collision aborts the run
        os.rename(source, target)
        logger.info(f"✅ Renamed {name} -> {owner_session}")
        logger.log_path_migration("session_rename", str(source), str(target))
        results.append(MigrationResult.migrated(Phase.SESSIONS, name))

    return results
