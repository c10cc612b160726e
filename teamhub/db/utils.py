"""
SQLite connection helpers for the document store.

Every connection TeamHub opens goes through get_sqlite_connection so the
collections file is always in WAL mode with foreign keys on. The store
passes isolation_level=None and issues BEGIN IMMEDIATE / COMMIT itself.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA foreign_keys=ON",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA cache_size=-8000",
    "PRAGMA temp_store=MEMORY",
)


def get_sqlite_connection(
    database: Union[str, Path],
    check_same_thread: bool = True,
    timeout: float = 30.0,
    isolation_level: Optional[str] = ""
) -> sqlite3.Connection:
    """
    Open a connection to the collections file.

    Args:
        database: SQLite file path
        check_same_thread: forwarded to sqlite3.connect
        timeout: seconds a writer waits on the database lock
        isolation_level: None leaves transaction control to the caller

    Returns:
        Connection with WAL enabled and sqlite3.Row rows
    """
    conn = sqlite3.connect(
        str(database),
        check_same_thread=check_same_thread,
        timeout=timeout,
        isolation_level=isolation_level
    )
    for pragma in PRAGMAS:
        conn.execute(pragma)
    conn.row_factory = sqlite3.Row

    logger.debug(f"Opened {database} (timeout={timeout}s)")
    return conn


def verify_wal_mode(database: Union[str, Path]) -> bool:
    """True when the file's journal mode is WAL; False on any sqlite error"""
    try:
        conn = sqlite3.connect(str(database))
        try:
            mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error(f"Could not read journal mode of {database}: {e}")
        return False
    return mode.lower() == "wal"
