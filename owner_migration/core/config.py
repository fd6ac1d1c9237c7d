"""
Configuration for the owner migration.

Environment defaults are read once at import (after loading a local .env);
the runner itself only ever sees a MigrationSettings value.
"""

import os
import re
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

load_dotenv()

# Canonical tenant every row and the retained session are assigned to
OWNER_ID = "owner"

# Tables carrying a userId column, processed in this order
TENANT_TABLES = (
    "groups",
    "autoreplies",
    "templates",
    "schedules",
    "commands",
    "settings",
    "crm_contacts",
    "crm_sequences",
)

TENANT_COLUMN = "userId"
SESSION_PREFIX = "session-"

# Folders under DATA_DIR that never belong to a tenant
RESERVED_DATA_FOLDERS = ("owner", "uploads")

# Filesystem locations, relative paths resolve against APP_ROOT
DB_PATH = os.getenv("DB_PATH", "./data/database.sqlite")
DATA_DIR = os.getenv("DATA_DIR", "./data")
SESSION_DIR = os.getenv("SESSION_DIR", "./.wwebjs_auth")
APP_ROOT = os.getenv("APP_ROOT")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class MigrationError(Exception):
    """Custom exception for owner migration failures that abort a run."""
    pass


class ConfigurationError(MigrationError):
    """Raised when migration settings cannot be built."""
    pass


class MigrationSettings(BaseModel):
    """Everything a single migration run needs to know."""

    model_config = ConfigDict(frozen=True)

    db_path: Path
    session_dir: Path
    data_dir: Path
    tables: Tuple[str, ...] = TENANT_TABLES
    owner_id: str = OWNER_ID
    tenant_column: str = TENANT_COLUMN

    @field_validator('tables')
    @classmethod
    def tables_must_be_identifiers(cls, v):
        # Table names are interpolated into SQL, never accept anything else
        for name in v:
            if not _IDENTIFIER.match(name):
                raise ValueError(f'invalid table name: {name!r}')
        return v

    @field_validator('tenant_column')
    @classmethod
    def column_must_be_identifier(cls, v):
        if not _IDENTIFIER.match(v):
            raise ValueError(f'invalid column name: {v!r}')
        return v

    @field_validator('owner_id')
    @classmethod
    def owner_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('owner_id cannot be empty')
        return v

    @property
    def owner_session_name(self) -> str:
        return f"{SESSION_PREFIX}{self.owner_id}"


def default_app_root() -> Path:
    """Directory the tool is run from."""
    return Path.cwd()


def _resolve(path: str, root: Path) -> Path:
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return root / candidate


def load_settings(app_root: Optional[Path] = None,
                  fallback_root: Optional[Path] = None) -> MigrationSettings:
    """Build settings from the environment-backed defaults.

    Relative paths resolve against `app_root` if given, else APP_ROOT, else
    `fallback_root` (the checkout a script lives in), else the working directory.
    """
    if app_root is None:
        if APP_ROOT:
            app_root = Path(APP_ROOT)
        elif fallback_root is not None:
            app_root = Path(fallback_root)
        else:
            app_root = default_app_root()

    try:
        return MigrationSettings(
            db_path=_resolve(DB_PATH, app_root),
            session_dir=_resolve(SESSION_DIR, app_root),
            data_dir=_resolve(DATA_DIR, app_root),
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
