"""
Unit Tests for the In-Memory Document Store

Tests upsert semantics, dimension pinning and concurrent writers.
"""

import threading

import numpy as np
import pytest

from sample_search.core.errors import DimensionMismatchError
from sample_search.retrieval.store import InMemoryDocumentStore


# ---------------------------------------------------------------------------
# UPSERT
# ---------------------------------------------------------------------------


class TestUpsert:
    """Test insert and replace behavior."""

    def test_empty_store_is_not_ready(self):
        store = InMemoryDocumentStore()

        assert store.count() == 0
        assert store.is_ready() is False
        assert store.dimension is None
        assert store.all_records() == []

    def test_upsert_makes_store_ready(self):
        store = InMemoryDocumentStore()
        record = store.upsert("a.cs", "class A {}", [0.1, 0.2, 0.3])

        assert store.is_ready() is True
        assert store.dimension == 3
        assert record.identifier == "a.cs"
        assert record.embedding.dtype == np.float32

    def test_upsert_is_idempotent(self):
        store = InMemoryDocumentStore()
        store.upsert("a.cs", "class A {}", [1.0, 0.0])
        store.upsert("a.cs", "class A {}", [1.0, 0.0])

        assert store.count() == 1

    def test_upsert_replaces_content_and_vector(self):
        store = InMemoryDocumentStore()
        store.upsert("a.cs", "old", [1.0, 0.0])
        store.upsert("a.cs", "new", [0.0, 1.0], version=10)

        record = store.get("a.cs")
        assert record.content == "new"
        np.testing.assert_array_equal(record.embedding, [0.0, 1.0])
        assert record.version == 10

    def test_get_missing_returns_none(self):
        assert InMemoryDocumentStore().get("missing.cs") is None

    def test_records_are_immutable(self):
        store = InMemoryDocumentStore()
        source = np.array([1.0, 2.0], dtype=np.float32)
        record = store.upsert("a.cs", "x", source)

        source[0] = 99.0
        assert record.embedding[0] == 1.0
        with pytest.raises(ValueError):
            record.embedding[0] = 5.0

    def test_all_records_is_snapshot(self):
        store = InMemoryDocumentStore()
        store.upsert("a.cs", "a", [1.0])
        snapshot = store.all_records()

        store.upsert("b.cs", "b", [1.0])

        assert [r.identifier for r in snapshot] == ["a.cs"]
        assert [r.identifier for r in store.all_records()] == ["a.cs", "b.cs"]

    def test_versions(self):
        store = InMemoryDocumentStore()
        store.upsert("common.cs", "c", [1.0])
        store.upsert("v9/a.cs", "a", [1.0], version=9)
        store.upsert("v10/a.cs", "a", [1.0], version=10)

        assert store.versions() == {9, 10}


# ---------------------------------------------------------------------------
# DIMENSIONALITY
# ---------------------------------------------------------------------------


class TestDimension:
    """Test dimension pinning."""

    def test_mismatch_rejected(self):
        store = InMemoryDocumentStore()
        store.upsert("a.cs", "a", [1.0, 0.0, 0.0])

        with pytest.raises(DimensionMismatchError) as exc_info:
            store.upsert("b.cs", "b", [1.0, 0.0])

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        assert store.get("b.cs") is None
        assert store.count() == 1

    def test_mismatched_overwrite_keeps_old_record(self):
        store = InMemoryDocumentStore()
        store.upsert("a.cs", "old", [1.0, 0.0])

        with pytest.raises(DimensionMismatchError):
            store.upsert("a.cs", "new", [1.0, 0.0, 0.0])

        assert store.get("a.cs").content == "old"

    def test_dimension_fixed_at_construction(self):
        store = InMemoryDocumentStore(dimension=4)

        with pytest.raises(DimensionMismatchError):
            store.upsert("a.cs", "a", [1.0, 0.0])


# ---------------------------------------------------------------------------
# CONCURRENCY
# ---------------------------------------------------------------------------


class TestConcurrency:
    """Test concurrent writers and readers."""

    def test_concurrent_upserts(self):
        store = InMemoryDocumentStore()
        per_thread = 200
        threads = 8
        failures = []

        def writer(n):
            seen = 0
            for i in range(per_thread):
                store.upsert(f"t{n}/doc{i}.cs", "x", [float(n), float(i), 1.0])
                records = store.all_records()
                # readers always see complete records
                failures.extend(r.identifier for r in records if r.dimension != 3)
                if len(records) < seen:
                    failures.append(f"count went from {seen} to {len(records)}")
                seen = len(records)

        workers = [threading.Thread(target=writer, args=(n,)) for n in range(threads)]
        for w in workers:
            w.start()
        for w in workers:
            w.join()

        assert failures == []
        assert store.count() == per_thread * threads

    def test_concurrent_writes_to_same_identifier(self):
        store = InMemoryDocumentStore()

        def writer(n):
            for _ in range(100):
                store.upsert("shared.cs", f"writer {n}", [float(n), 1.0])

        workers = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for w in workers:
            w.start()
        for w in workers:
            w.join()

        record = store.get("shared.cs")
        assert store.count() == 1
        writer_id = int(record.content.split()[-1])
        assert record.embedding[0] == float(writer_id)
