"""SQLite access for the owner migration."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List

from .config import MigrationError


@contextmanager
def get_db(db_path: Path) -> Generator[sqlite3.Connection, None, None]:
    """Open an existing SQLite database read-write.

    A missing file is an error: connecting must never create an empty
    database in place of the real one.
    """
    db_path = Path(db_path)
    if not db_path.is_file():
        raise MigrationError(f"Database file not found: {db_path}")

    conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=rw", uri=True)
    try:
        yield conn
    finally:
        conn.close()


def distinct_tenants(conn: sqlite3.Connection, table: str, column: str, owner_id: str) -> List[str]:
    """Distinct tenant ids in `table` other than the owner."""
    # Column stays unquoted: SQLite reads an unknown "quoted" column as a string literal
    cursor = conn.execute(
        f'SELECT DISTINCT {column} FROM "{table}" WHERE {column} <> ?',
        (owner_id,)
    )
    return [str(row[0]) for row in cursor.fetchall()]


def reassign_to_owner(conn: sqlite3.Connection, table: str, column: str, owner_id: str) -> int:
    """Point every non-owner row of `table` at the owner and commit."""
    cursor = conn.execute(
        f'UPDATE "{table}" SET {column} = ? WHERE {column} <> ?',
        (owner_id, owner_id)
    )
    conn.commit()
    return cursor.rowcount
