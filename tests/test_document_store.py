"""
Tests for teamhub/db/document_store.py

Coverage targets:
- Initialization: idempotent migration, WAL mode
- Reads: find/find_one/count/exists with equality and $in/$all/$ne filters
- Sorting and limits
- Writes: insert_one, update_one (set/add_to_set/pull/upsert), delete_one/many
- Transactions: commit on success, rollback on exception
- Guard rails: unknown collections, unsafe field names, storage errors
"""

import pytest

from teamhub.db import DocumentStore, UpdateResult, matches, verify_wal_mode
from teamhub.errors import StorageError


# ========== Initialization ==========

class TestInitialize:

    def test_initialize_is_idempotent(self, store):
        store.initialize()
        store.initialize()
        with store.read() as session:
            assert session.count("teams") == 0

    def test_wal_mode_enabled(self, store):
        assert verify_wal_mode(store.database) is True

    def test_creates_parent_directory(self, tmp_path):
        store = DocumentStore(tmp_path / "nested" / "dir" / "store.db").initialize()
        assert store.database.exists()


# ========== Reads ==========

class TestFind:

    @pytest.fixture
    def seeded(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1", "name": "Alpha", "members": ["m1", "m2"], "rank": 3})
            session.insert_one("teams", {"id": "t2", "name": "Bravo", "members": ["m2"], "rank": 1})
            session.insert_one("teams", {"id": "t3", "name": "Charlie", "members": [], "rank": 2})
        return store

    def test_find_by_id(self, seeded):
        with seeded.read() as session:
            doc = session.find_one("teams", {"id": "t2"})
        assert doc["name"] == "Bravo"

    def test_find_returns_insertion_order(self, seeded):
        with seeded.read() as session:
            names = [doc["name"] for doc in session.find("teams")]
        assert names == ["Alpha", "Bravo", "Charlie"]

    def test_scalar_matches_array_member(self, seeded):
        with seeded.read() as session:
            ids = [doc["id"] for doc in session.find("teams", {"members": "m2"})]
        assert ids == ["t1", "t2"]

    def test_list_filter_compares_exactly(self, seeded):
        with seeded.read() as session:
            assert [d["id"] for d in session.find("teams", {"members": ["m2"]})] == ["t2"]
            assert session.find("teams", {"members": ["m2", "m1"]}) == []

    def test_in_operator(self, seeded):
        with seeded.read() as session:
            ids = [doc["id"] for doc in session.find("teams", {"name": {"$in": ["Alpha", "Charlie"]}})]
        assert ids == ["t1", "t3"]

    def test_all_operator(self, seeded):
        with seeded.read() as session:
            ids = [doc["id"] for doc in session.find("teams", {"members": {"$all": ["m1", "m2"]}})]
        assert ids == ["t1"]

    def test_ne_operator(self, seeded):
        with seeded.read() as session:
            ids = [doc["id"] for doc in session.find("teams", {"id": {"$ne": "t1"}})]
        assert ids == ["t2", "t3"]

    def test_sort_and_limit(self, seeded):
        with seeded.read() as session:
            ascending = [d["id"] for d in session.find("teams", sort=[("rank", 1)])]
            top = session.find("teams", sort=[("rank", -1)], limit=1)
        assert ascending == ["t2", "t3", "t1"]
        assert [d["id"] for d in top] == ["t1"]

    def test_descending_sort_breaks_ties_newest_first(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "a", "created_at": "2026-01-01T00:00:00+00:00"})
            session.insert_one("teams", {"id": "b", "created_at": "2026-01-01T00:00:00+00:00"})
        with store.read() as session:
            newest = session.find_one("teams", sort=[("created_at", -1)])
        assert newest["id"] == "b"

    def test_count_and_exists(self, seeded):
        with seeded.read() as session:
            assert session.count("teams", {"members": "m2"}) == 2
            assert session.exists("teams", {"name": "Bravo"}) is True
            assert session.exists("teams", {"name": "Delta"}) is False

    def test_missing_field_does_not_match(self, seeded):
        with seeded.read() as session:
            assert session.find("teams", {"game": "Chess"}) == []

    def test_matches_helper(self):
        doc = {"roles": ["Owner", "Member"], "status": "Sent"}
        assert matches(doc, {"roles": "Owner", "status": "Sent"})
        assert not matches(doc, {"roles": {"$ne": "Owner"}})
        assert matches(doc, {"roles": {"$in": ["Manager", "Member"]}})


# ========== Writes ==========

class TestWrites:

    def test_insert_assigns_id(self, store):
        with store.transaction() as session:
            doc_id = session.insert_one("teams", {"name": "Alpha"})
            doc = session.find_one("teams", {"id": doc_id})
        assert doc == {"name": "Alpha", "id": doc_id}

    def test_insert_duplicate_id_raises_storage_error(self, store):
        with pytest.raises(StorageError):
            with store.transaction() as session:
                session.insert_one("teams", {"id": "dup"})
                session.insert_one("teams", {"id": "dup"})

    def test_update_set_fields(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1", "name": "Alpha"})
            result = session.update_one("teams", {"id": "t1"}, set_fields={"name": "Omega"})
            doc = session.find_one("teams", {"id": "t1"})
        assert result == UpdateResult(matched_count=1, modified_count=1)
        assert doc["name"] == "Omega"

    def test_update_without_change_reports_zero_modified(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1", "name": "Alpha"})
            result = session.update_one("teams", {"id": "t1"}, set_fields={"name": "Alpha"})
        assert result.matched_count == 1
        assert result.modified_count == 0

    def test_add_to_set_is_idempotent(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1", "members": ["a"]})
            first = session.update_one("teams", {"id": "t1"}, add_to_set={"members": ["b", "a"]})
            second = session.update_one("teams", {"id": "t1"}, add_to_set={"members": "b"})
            doc = session.find_one("teams", {"id": "t1"})
        assert first.modified_count == 1
        assert second.modified_count == 0
        assert doc["members"] == ["a", "b"]

    def test_pull_removes_values(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1", "members": ["a", "b", "c"]})
            session.update_one("teams", {"id": "t1"}, pull={"members": "b"})
            doc = session.find_one("teams", {"id": "t1"})
        assert doc["members"] == ["a", "c"]

    def test_update_missing_without_upsert(self, store):
        with store.transaction() as session:
            result = session.update_one("teams", {"id": "nope"}, set_fields={"name": "x"})
        assert result == UpdateResult()

    def test_upsert_builds_document_from_filter(self, store):
        with store.transaction() as session:
            result = session.update_one(
                "team-members",
                {"team_id": "t1", "user_id": "u1"},
                add_to_set={"roles": ["Member", "Member"]},
                upsert=True,
                set_on_insert={"created_at": "now"}
            )
            doc = session.find_one("team-members", {"id": result.upserted_id})
        assert result.matched_count == 0
        assert doc["team_id"] == "t1"
        assert doc["user_id"] == "u1"
        assert doc["roles"] == ["Member"]
        assert doc["created_at"] == "now"

    def test_id_cannot_be_updated(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1"})
            with pytest.raises(ValueError):
                session.update_one("teams", {"id": "t1"}, set_fields={"id": "t2"})

    def test_delete_one_and_many(self, store):
        with store.transaction() as session:
            for i in range(3):
                session.insert_one("team-invitations", {"team_id": "t1", "n": i})
            session.insert_one("team-invitations", {"team_id": "t2", "n": 9})
            assert session.delete_one("team-invitations", {"team_id": "t1"}) == 1
            assert session.delete_many("team-invitations", {"team_id": "t1"}) == 2
            assert session.delete_one("team-invitations", {"team_id": "t1"}) == 0
            assert session.count("team-invitations") == 1


# ========== Transactions ==========

class TestTransactions:

    def test_commit_on_success(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1"})
        with store.read() as session:
            assert session.exists("teams", {"id": "t1"})

    def test_rollback_on_exception(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction() as session:
                session.insert_one("teams", {"id": "t1"})
                session.update_one("teams", {"id": "t1"}, set_fields={"name": "x"})
                raise RuntimeError("boom")
        with store.read() as session:
            assert session.count("teams") == 0


# ========== Guard Rails ==========

class TestGuardRails:

    def test_unknown_collection(self, store):
        with store.read() as session:
            with pytest.raises(ValueError, match="Unknown collection"):
                session.find("teamz")

    def test_unsafe_field_in_filter(self, store):
        with store.read() as session:
            with pytest.raises(ValueError, match="Unsafe field"):
                session.find("teams", {"name') OR 1=1 --": "x"})

    def test_unsupported_operator(self, store):
        with store.transaction() as session:
            session.insert_one("teams", {"id": "t1", "rank": 1})
            with pytest.raises(ValueError, match="Unsupported filter operator"):
                session.find("teams", {"rank": {"$gt": 0}})

    def test_unopenable_database_raises_storage_error(self, tmp_path):
        bad = DocumentStore(tmp_path / "missing-dir" / "x.db")
        with pytest.raises(StorageError):
            with bad.read():
                pass
