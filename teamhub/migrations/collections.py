"""
Document Collections Migration

Creates one table per document collection plus the JSON indexes the team
and org services filter on. Idempotent: safe to run on every startup.
"""

import sqlite3
import logging
from datetime import datetime, UTC

logger = logging.getLogger(__name__)

MIGRATION_NAME = "2026_01_15_document_collections"

COLLECTIONS = (
    "users",
    "teams",
    "team-members",
    "team-invitations",
    "orgs",
    "org-members",
)

# (collection, index suffix, indexed document field)
JSON_INDEXES = (
    ("teams", "name", "name"),
    ("team-members", "team_user", "team_id, user_id"),
    ("team-invitations", "team_send_to", "team_id, send_to"),
    ("team-invitations", "send_to", "send_to"),
    ("orgs", "name", "name"),
    ("org-members", "org_user", "org_id, user_id"),
)


def table_name(collection: str) -> str:
    """SQLite table backing a collection ('team-members' -> 'team_members')"""
    return collection.replace("-", "_")


def ensure_migrations_table(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS migrations (
            migration_name TEXT PRIMARY KEY,
            applied_at TEXT NOT NULL
        )
    """)


def check_migration_applied(conn: sqlite3.Connection) -> bool:
    """Check if the collections migration has already been applied"""
    ensure_migrations_table(conn)
    row = conn.execute(
        "SELECT 1 FROM migrations WHERE migration_name = ?",
        (MIGRATION_NAME,)
    ).fetchone()
    return row is not None


def create_collection_tables(conn: sqlite3.Connection) -> None:
    """Create one JSON document table per collection"""
    for collection in COLLECTIONS:
        table = table_name(collection)
        logger.debug(f"Creating {table} table...")
        conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {table} (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT UNIQUE NOT NULL,
                doc TEXT NOT NULL
            )
        """)

    for collection, suffix, fields in JSON_INDEXES:
        table = table_name(collection)
        expressions = ", ".join(
            f"json_extract(doc, '$.{field.strip()}')" for field in fields.split(",")
        )
        conn.execute(
            f"CREATE INDEX IF NOT EXISTS idx_{table}_{suffix} ON {table}({expressions})"
        )


def record_migration(conn: sqlite3.Connection) -> None:
    """Record migration in migrations table"""
    now = datetime.now(UTC).isoformat()
    conn.execute("""
        INSERT OR IGNORE INTO migrations (migration_name, applied_at)
        VALUES (?, ?)
    """, (MIGRATION_NAME, now))
    logger.info(f"Migration recorded: {MIGRATION_NAME} at {now}")


def migrate_collections(conn: sqlite3.Connection) -> bool:
    """
    Run the collections migration on an open connection.

    The caller owns the transaction.

    Returns:
        bool: True if the migration ran, False if it was already applied
    """
    if check_migration_applied(conn):
        logger.debug("Collections migration already applied")
        return False

    create_collection_tables(conn)
    record_migration(conn)
    return True
