# tests/test_document_store.py
"""Both store backends must behave the same: run every test against each."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from hostel_gate.database import create_tables
from hostel_gate.exceptions import DocumentNotFoundError, StoreError
from hostel_gate.services.document_store import ArrayAppend, InMemoryDocumentStore, SqlDocumentStore


def make_sql_store():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    return SqlDocumentStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture(params=["memory", "sql"])
def store(request):
    return InMemoryDocumentStore() if request.param == "memory" else make_sql_store()


class TestDocumentStore:
    def test_get_missing_returns_none(self, store):
        assert store.get("students", "NOPE") is None

    def test_set_then_get(self, store):
        store.set("students", "CS101", {"name": "Ravi", "logs": []})
        snap = store.get("students", "CS101")
        assert snap.key == "CS101"
        assert snap.data == {"name": "Ravi", "logs": []}

    def test_set_overwrites(self, store):
        store.set("students", "CS101", {"name": "Ravi", "branch": "ECE"})
        store.set("students", "CS101", {"name": "Ravi K"})
        assert store.get("students", "CS101").data == {"name": "Ravi K"}

    def test_update_merges_fields(self, store):
        store.set("allLogged", "k1", {"action": "Entry", "exit": None})
        store.update("allLogged", "k1", {"exit": "19/10/2026, 10:00:00"})
        assert store.get("allLogged", "k1").data == {"action": "Entry", "exit": "19/10/2026, 10:00:00"}

    def test_array_append(self, store):
        store.set("students", "CS101", {"name": "Ravi", "logs": []})
        store.update("students", "CS101", {"logs": ArrayAppend({"action": "Entry"})})
        store.update("students", "CS101", {"logs": ArrayAppend({"action": "Entry"})})
        assert store.get("students", "CS101").data["logs"] == [{"action": "Entry"}, {"action": "Entry"}]

    def test_array_append_creates_missing_list(self, store):
        store.set("students", "CS101", {"name": "Ravi"})
        store.update("students", "CS101", {"logs": ArrayAppend({"action": "Exit"})})
        assert store.get("students", "CS101").data["logs"] == [{"action": "Exit"}]

    def test_update_missing_document_raises(self, store):
        with pytest.raises(DocumentNotFoundError):
            store.update("students", "NOPE", {"name": "x"})

    def test_not_found_is_a_store_error(self):
        assert issubclass(DocumentNotFoundError, StoreError)

    def test_returned_data_is_a_copy(self, store):
        store.set("students", "CS101", {"logs": []})
        store.get("students", "CS101").data["logs"].append("mutated")
        assert store.get("students", "CS101").data["logs"] == []

    def test_query_orders_and_limits(self, store):
        for i, ts in enumerate(["2026-10-19T08:00:00.000000+00:00",
                                "2026-10-19T10:00:00.000000+00:00",
                                "2026-10-19T09:00:00.000000+00:00"]):
            store.set("allLogged", f"k{i}", {"timestamp": ts})
        keys = [s.key for s in store.query("allLogged", order_by="timestamp", descending=True, limit=2)]
        assert keys == ["k1", "k2"]

    def test_query_where_with_null(self, store):
        store.set("allLogged", "open", {"regNo": "CS101", "action": "Entry", "exit": None, "timestamp": "1"})
        store.set("allLogged", "closed", {"regNo": "CS101", "action": "Entry", "exit": "done", "timestamp": "2"})
        store.set("allLogged", "other", {"regNo": "CS102", "action": "Entry", "exit": None, "timestamp": "3"})
        found = store.query("allLogged", where=[("regNo", "CS101"), ("exit", None)], order_by="timestamp")
        assert [s.key for s in found] == ["open"]

    def test_query_is_scoped_to_collection(self, store):
        store.set("students", "CS101", {"timestamp": "1"})
        assert store.query("allLogged", order_by="timestamp") == []

    def test_ordered_query_skips_documents_without_field(self, store):
        store.set("allLogged", "a", {"timestamp": "1"})
        store.set("allLogged", "b", {"name": "no timestamp"})
        assert [s.key for s in store.query("allLogged", order_by="timestamp")] == ["a"]
