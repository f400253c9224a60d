# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for optimistic ledger transactions.

Verifies read-set validation, buffered writes, rollback and the
transaction lifecycle on every backend.
"""

import pytest

from donation_ledger.core import ConflictError, TransactionStateError


class TestLedgerTransactionLifecycle:
    def test_context_manager_commits(self, backend):
        with backend.transaction() as txn:
            txn.put("k1", b"v1")
            # Buffered, not yet visible
            assert backend.get("k1") is None
        assert backend.get("k1") == b"v1"
        assert txn.completed

    def test_exception_rolls_back(self, backend):
        with pytest.raises(RuntimeError):
            with backend.transaction() as txn:
                txn.put("k1", b"v1")
                raise RuntimeError("boom")
        assert backend.get("k1") is None
        assert txn.completed

    def test_reads_see_committed_state_only(self, backend):
        backend.put("k1", b"old")
        with backend.transaction() as txn:
            txn.put("k1", b"new")
            assert txn.get("k1") == b"old"
        assert backend.get("k1") == b"new"

    def test_buffers_last_write_per_key(self, backend):
        with backend.transaction() as txn:
            txn.put("k1", b"v1")
            txn.put("k1", b"v2")
            txn.delete("k2")
            assert txn.write_set == {"k1": b"v2", "k2": None}
        assert backend.get("k1") == b"v2"

    def test_delete_applies_on_commit(self, backend):
        backend.put("k1", b"v1")
        txn = backend.transaction()
        txn.delete("k1")
        assert backend.get("k1") == b"v1"
        txn.commit()
        assert backend.get("k1") is None

    def test_use_after_commit_raises(self, backend):
        txn = backend.transaction()
        txn.commit()
        with pytest.raises(TransactionStateError):
            txn.get("k1")
        with pytest.raises(TransactionStateError):
            txn.commit()

    def test_rollback_is_idempotent(self, backend):
        txn = backend.transaction()
        txn.put("k1", b"v1")
        txn.rollback()
        txn.rollback()
        assert backend.get("k1") is None

    def test_nested_transactions_rejected(self, backend):
        with backend.transaction() as txn:
            with pytest.raises(TransactionStateError, match="Nested"):
                txn.transaction()
            with pytest.raises(TransactionStateError, match="Nested"):
                txn.__enter__()


class TestOptimisticConflicts:
    def test_concurrent_write_to_read_key_conflicts(self, backend):
        backend.put("k1", b"v1")
        first = backend.transaction()
        second = backend.transaction()

        first.get("k1")
        second.get("k1")
        first.put("k1", b"first")
        second.put("k1", b"second")

        first.commit()
        with pytest.raises(ConflictError) as excinfo:
            second.commit()

        assert excinfo.value.key == "k1"
        assert backend.get("k1") == b"first"

    def test_conflict_applies_nothing(self, backend):
        backend.put("k1", b"v1")
        txn = backend.transaction()
        txn.get("k1")
        txn.put("k2", b"side effect")
        backend.put("k1", b"concurrent")

        with pytest.raises(ConflictError):
            txn.commit()
        assert backend.get("k2") is None

    def test_absent_key_created_concurrently_conflicts(self, backend):
        txn = backend.transaction()
        assert txn.get("k1") is None
        backend.put("k1", b"concurrent")
        txn.put("k1", b"mine")

        with pytest.raises(ConflictError):
            txn.commit()
        assert backend.get("k1") == b"concurrent"

    def test_delete_and_recreate_still_conflicts(self, backend):
        backend.put("k1", b"v1")
        txn = backend.transaction()
        txn.get("k1")
        backend.delete("k1")
        backend.put("k1", b"v1")
        txn.put("k1", b"mine")

        with pytest.raises(ConflictError):
            txn.commit()

    def test_unread_keys_do_not_conflict(self, backend):
        backend.put("k1", b"v1")
        txn = backend.transaction()
        txn.put("k1", b"blind write")
        backend.put("k1", b"concurrent")
        txn.commit()
        assert backend.get("k1") == b"blind write"

    def test_scanned_keys_join_read_set(self, backend):
        backend.put("a", b"1")
        backend.put("b", b"2")
        txn = backend.transaction()
        with txn.scan() as results:
            list(results)
        assert set(txn.read_set) == {"a", "b"}

        backend.put("b", b"changed")
        with pytest.raises(ConflictError):
            txn.commit()

    def test_rereading_a_changed_key_conflicts_immediately(self, backend):
        backend.put("k1", b"v1")
        txn = backend.transaction()
        txn.get("k1")
        backend.put("k1", b"v2")
        with pytest.raises(ConflictError):
            txn.get("k1")
