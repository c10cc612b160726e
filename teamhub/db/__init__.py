"""
Database Package

Provides the persistence gateway for TeamHub:
- get_sqlite_connection with WAL mode
- DocumentStore / DocumentSession: JSON document collections with transactions
"""

from teamhub.db.utils import get_sqlite_connection, verify_wal_mode
from teamhub.db.document_store import (
    DocumentStore,
    DocumentSession,
    UpdateResult,
    matches,
)

__all__ = [
    # Utils
    "get_sqlite_connection",
    "verify_wal_mode",
    # Document store
    "DocumentStore",
    "DocumentSession",
    "UpdateResult",
    "matches",
]
