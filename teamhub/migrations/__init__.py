"""Schema migrations for the TeamHub document store"""

from teamhub.migrations.collections import (
    COLLECTIONS,
    MIGRATION_NAME,
    migrate_collections,
    table_name,
)

__all__ = ["COLLECTIONS", "MIGRATION_NAME", "migrate_collections", "table_name"]
