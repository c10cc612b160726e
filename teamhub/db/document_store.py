"""
Document Store

JSON document collections over SQLite. Every collection is a table of
`(seq, id, doc)` rows; documents are JSON objects keyed by `id`.

All access goes through a session bound to one SQLite transaction:

    store = DocumentStore(settings.database_path)
    store.initialize()

    with store.transaction() as session:      # BEGIN IMMEDIATE
        team = session.find_one("teams", {"id": team_id})
        session.update_one("teams", {"id": team_id}, add_to_set={"members": member_id})

    with store.read() as session:             # deferred (read) transaction
        members = session.find("team-members", {"team_id": team_id})

A transaction commits when the block exits normally and rolls back when
it raises. BEGIN IMMEDIATE takes the write lock up front, so writers are
serialized and every check-then-write inside one block is atomic.
"""

import json
import re
import sqlite3
import uuid
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from teamhub.db.utils import get_sqlite_connection
from teamhub.errors import StorageError, ErrorType
from teamhub.migrations import COLLECTIONS, migrate_collections, table_name

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_OPERATORS = {"$in", "$all", "$ne"}

SortSpec = Sequence[Tuple[str, int]]


@dataclass
class UpdateResult:
    """Outcome of update_one"""
    matched_count: int = 0
    modified_count: int = 0
    upserted_id: Optional[str] = None


def _check_collection(collection: str) -> str:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")
    return table_name(collection)


def _check_field(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Unsafe field name: {field!r}")
    return field


def _is_operator_dict(condition: Any) -> bool:
    return isinstance(condition, dict) and any(key.startswith("$") for key in condition)


def _matches_condition(value: Any, condition: Any) -> bool:
    if _is_operator_dict(condition):
        for op, operand in condition.items():
            if op not in _OPERATORS:
                raise ValueError(f"Unsupported filter operator: {op}")
            if op == "$in":
                if isinstance(value, list):
                    if not any(item in operand for item in value):
                        return False
                elif value not in operand:
                    return False
            elif op == "$all":
                if not isinstance(value, list) or not all(item in value for item in operand):
                    return False
            elif op == "$ne":
                if isinstance(value, list) and not isinstance(operand, list):
                    if operand in value:
                        return False
                elif value == operand:
                    return False
        return True

    # Scalar against an array field matches when the array contains it
    if isinstance(value, list) and not isinstance(condition, list):
        return condition in value
    return value == condition


def matches(document: Dict[str, Any], filter: Dict[str, Any]) -> bool:
    """True when every field condition in `filter` holds for `document`"""
    for field, condition in filter.items():
        _check_field(field)
        if not _matches_condition(document.get(field), condition):
            return False
    return True


def _sort_key(field: str):
    def key(doc: Dict[str, Any]):
        value = doc.get(field)
        return (value is None, value if value is not None else "")
    return key


class DocumentSession:
    """Collection operations bound to one open SQLite transaction"""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    # ========================================================================
    # LOW-LEVEL
    # ========================================================================

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, tuple(params))
        except sqlite3.Error as e:
            logger.error(f"Document store query failed: {e}")
            raise StorageError(
                f"Document store query failed: {e}",
                details={"sql": sql.split("WHERE")[0].strip()}
            ) from e

    def _candidates(self, collection: str, filter: Dict[str, Any]) -> List[Tuple[int, Dict[str, Any]]]:
        """Rows narrowed in SQL by scalar equality, then matched exactly in Python"""
        table = _check_collection(collection)
        clauses = []
        params: List[Any] = []

        for field, condition in filter.items():
            _check_field(field)
            if isinstance(condition, bool) or not isinstance(condition, (str, int, float)):
                continue
            if field == "id":
                clauses.append("id = ?")
            else:
                # Scalar equality also matches array members; only narrow top-level scalars
                clauses.append(
                    f"(json_type(doc, '$.{field}') = 'array' OR json_extract(doc, '$.{field}') = ?)"
                )
            params.append(condition)

        sql = f"SELECT seq, doc FROM {table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY seq"

        rows = self._execute(sql, params).fetchall()
        results = []
        for row in rows:
            doc = json.loads(row["doc"])
            if matches(doc, filter):
                results.append((row["seq"], doc))
        return results

    def _write(self, table: str, seq: int, doc: Dict[str, Any]) -> None:
        self._execute(f"UPDATE {table} SET doc = ? WHERE seq = ?", (json.dumps(doc), seq))

    # ========================================================================
    # READS
    # ========================================================================

    def find(
        self,
        collection: str,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """All matching documents, in insertion order unless `sort` is given"""
        rows = self._candidates(collection, filter or {})

        if sort:
            for field, _direction in sort:
                _check_field(field)
            # Insertion order breaks ties, in the direction of the primary key
            rows.sort(key=lambda r: r[0], reverse=sort[0][1] < 0)
            for field, direction in reversed(list(sort)):
                rows.sort(key=lambda r, k=_sort_key(field): k(r[1]), reverse=direction < 0)

        docs = [doc for _seq, doc in rows]
        if limit is not None:
            docs = docs[:limit]
        return docs

    def find_one(
        self,
        collection: str,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None
    ) -> Optional[Dict[str, Any]]:
        docs = self.find(collection, filter, sort=sort, limit=1)
        return docs[0] if docs else None

    def count(self, collection: str, filter: Optional[Dict[str, Any]] = None) -> int:
        return len(self._candidates(collection, filter or {}))

    def exists(self, collection: str, filter: Dict[str, Any]) -> bool:
        return self.count(collection, filter) > 0

    # ========================================================================
    # WRITES
    # ========================================================================

    def insert_one(self, collection: str, document: Dict[str, Any]) -> str:
        """Insert a document, assigning a uuid4 `id` when it has none. Returns the id."""
        table = _check_collection(collection)
        doc = dict(document)
        doc.setdefault("id", str(uuid.uuid4()))
        for field in doc:
            _check_field(field)

        self._execute(
            f"INSERT INTO {table} (id, doc) VALUES (?, ?)",
            (doc["id"], json.dumps(doc))
        )
        return doc["id"]

    def update_one(
        self,
        collection: str,
        filter: Dict[str, Any],
        set_fields: Optional[Dict[str, Any]] = None,
        add_to_set: Optional[Dict[str, Any]] = None,
        pull: Optional[Dict[str, Any]] = None,
        upsert: bool = False,
        set_on_insert: Optional[Dict[str, Any]] = None
    ) -> UpdateResult:
        """
        Update the first matching document.

        Args:
            set_fields: Fields to overwrite
            add_to_set: Array fields to extend; values already present are skipped
            pull: Array fields to remove values from
            upsert: Insert a new document when nothing matches
            set_on_insert: Extra fields written only when upserting

        Returns:
            UpdateResult(matched_count, modified_count, upserted_id)
        """
        table = _check_collection(collection)
        set_fields = set_fields or {}
        add_to_set = add_to_set or {}
        pull = pull or {}
        for field in list(set_fields) + list(add_to_set) + list(pull):
            _check_field(field)
        if "id" in set_fields:
            raise ValueError("Document id cannot be updated")

        rows = self._candidates(collection, filter)

        if not rows:
            if not upsert:
                return UpdateResult()
            doc = {
                field: condition for field, condition in filter.items()
                if not _is_operator_dict(condition)
            }
            doc.update(set_on_insert or {})
            doc.update(set_fields)
            for field, values in add_to_set.items():
                doc[field] = _union([], values)
            upserted_id = self.insert_one(collection, doc)
            return UpdateResult(upserted_id=upserted_id)

        seq, doc = rows[0]
        original = json.dumps(doc, sort_keys=True)

        for field, value in set_fields.items():
            doc[field] = value
        for field, values in add_to_set.items():
            doc[field] = _union(doc.get(field) or [], values)
        for field, values in pull.items():
            to_remove = values if isinstance(values, list) else [values]
            doc[field] = [item for item in (doc.get(field) or []) if item not in to_remove]

        if json.dumps(doc, sort_keys=True) == original:
            return UpdateResult(matched_count=1)

        self._write(table, seq, doc)
        return UpdateResult(matched_count=1, modified_count=1)

    def delete_one(self, collection: str, filter: Dict[str, Any]) -> int:
        table = _check_collection(collection)
        rows = self._candidates(collection, filter)
        if not rows:
            return 0
        self._execute(f"DELETE FROM {table} WHERE seq = ?", (rows[0][0],))
        return 1

    def delete_many(self, collection: str, filter: Dict[str, Any]) -> int:
        table = _check_collection(collection)
        rows = self._candidates(collection, filter)
        for seq, _doc in rows:
            self._execute(f"DELETE FROM {table} WHERE seq = ?", (seq,))
        return len(rows)


def _union(existing: List[Any], values: Any) -> List[Any]:
    """Existing order first, new values appended, no duplicates"""
    merged = []
    for item in list(existing) + (values if isinstance(values, list) else [values]):
        if item not in merged:
            merged.append(item)
    return merged


class DocumentStore:
    """
    Thread-safe entry point to the document collections.

    Holds no connection of its own: each transaction opens a fresh
    connection in the calling thread, so a store can be shared by
    worker threads (asyncio.to_thread) without locking.
    """

    def __init__(self, database: Union[str, Path], timeout: float = 30.0):
        self.database = Path(database)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings=None) -> "DocumentStore":
        if settings is None:
            from teamhub.config import get_settings
            settings = get_settings()
        return cls(settings.database_path, timeout=settings.db_timeout_seconds)

    def _connect(self) -> sqlite3.Connection:
        try:
            return get_sqlite_connection(self.database, timeout=self.timeout, isolation_level=None)
        except sqlite3.Error as e:
            logger.error(f"Failed to open document store {self.database}: {e}")
            raise StorageError(
                f"Failed to open document store: {e}",
                details={"database": str(self.database)}
            ) from e

    def initialize(self) -> "DocumentStore":
        """Create collection tables and indexes (idempotent)"""
        self.database.parent.mkdir(parents=True, exist_ok=True)
        with self._session("BEGIN IMMEDIATE") as session:
            if migrate_collections(session._conn):
                logger.info(f"Document store initialized at {self.database}")
        return self

    @contextmanager
    def _session(self, begin: str) -> Iterator[DocumentSession]:
        conn = self._connect()
        try:
            try:
                conn.execute(begin)
            except sqlite3.Error as e:
                logger.error(f"Failed to begin transaction: {e}")
                raise StorageError(
                    f"Failed to begin transaction: {e}",
                    error_type=ErrorType.STORAGE_FAILURE
                ) from e

            try:
                yield DocumentSession(conn)
            except BaseException:
                conn.rollback()
                raise

            try:
                conn.commit()
            except sqlite3.Error as e:
                logger.error(f"Failed to commit transaction: {e}")
                conn.rollback()
                raise StorageError(f"Failed to commit transaction: {e}") from e
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[DocumentSession]:
        """Write transaction: commit on normal exit, roll back on any exception"""
        with self._session("BEGIN IMMEDIATE") as session:
            yield session

    @contextmanager
    def read(self) -> Iterator[DocumentSession]:
        """Read-only view; writes made through it are still committed on exit"""
        with self._session("BEGIN") as session:
            yield session
