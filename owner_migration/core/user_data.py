"""User-data phase: fold the legacy per-user data folder into data/owner."""

import shutil
from pathlib import Path
from typing import List

from util.logging import get_logger

from .config import RESERVED_DATA_FOLDERS, MigrationSettings
from .results import MigrationResult, Phase

logger = get_logger(__name__)


def find_user_folders(data_dir: Path, owner_id: str) -> List[Path]:
    """Per-user folders directly under data_dir, in listing order."""
    return [
        entry for entry in data_dir.iterdir()
        if entry.is_dir()
        and entry.name != owner_id
        and entry.name not in RESERVED_DATA_FOLDERS
        and not entry.name.startswith('.')
    ]


def _copy_entry(source: Path, dest: Path):
    if source.is_dir():
        shutil.copytree(source, dest)
    else:
        shutil.copy2(source, dest)


def migrate_user_data(settings: MigrationSettings) -> List[MigrationResult]:
    data_dir = settings.data_dir

    if not data_dir.is_dir():
        logger.warning(f"⚠️  Data directory not found: {data_dir}")
        return []

    folders = find_user_folders(data_dir, settings.owner_id)
    if not folders:
        logger.info("No user folders to migrate")
        return []

    logger.info(f"Found user folders: {', '.join(f.name for f in folders)}")

    owner_dir = data_dir / settings.owner_id
    owner_dir.mkdir(parents=True, exist_ok=True)

    # Only the first folder is copied; the others are reported above and left alone
    source_folder = folders[0]
    results = []
    for entry in sorted(source_folder.iterdir()):
        dest = owner_dir / entry.name
        name = f"{source_folder.name}/{entry.name}"

        # Typically copied by an earlier run; never overwritten
        if dest.exists():
            reason = f"{entry.name} already exists in {settings.owner_id} folder"
            logger.info(f"{reason}, skipping")
            logger.log_path_migration("data_copy", str(entry), str(dest), "noop", reason)
            results.append(MigrationResult.noop(Phase.USER_DATA, name, reason))
            continue

        _copy_entry(entry, dest)
        logger.info(f"✅ Copied {entry.name} to {settings.owner_id} folder")
        logger.log_path_migration("data_copy", str(entry), str(dest))
        results.append(MigrationResult.migrated(Phase.USER_DATA, name))

    return results
