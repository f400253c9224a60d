# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Optimistic ledger transactions.

A transaction reads committed state straight from its backend, remembering
the version of every key it saw (the read set), and buffers its writes (the
write set). On commit the read set is validated against the backend's
current versions under the backend lock; if any key changed, the commit is
rejected with :class:`ConflictError` and nothing is applied. Otherwise the
whole write set is applied atomically.

Reads never observe the transaction's own buffered writes: every read
reflects state as committed before the transaction commits.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional

from ..core.errors import ConflictError, TransactionStateError
from .base import ScanIterator, WriteSet, check_key, check_value

if TYPE_CHECKING:
    from .base import LedgerBackend

logger = logging.getLogger(__name__)


class LedgerTransaction:
    """
    Read-set / write-set transaction over a :class:`LedgerBackend`.

    Exposes the same ``get``/``put``/``delete``/``scan`` interface as a
    backend, so a record store can be bound to either.

    The context manager commits on clean exit and rolls back when the
    block raises.
    """

    def __init__(self, backend: "LedgerBackend") -> None:
        self._backend = backend
        self._read_set: Dict[str, Optional[int]] = {}
        self._write_set: WriteSet = {}
        self._in_context = False
        self._completed = False

    @property
    def backend(self) -> "LedgerBackend":
        return self._backend

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def read_set(self) -> Dict[str, Optional[int]]:
        """Versions observed so far, keyed by ledger key."""
        return dict(self._read_set)

    @property
    def write_set(self) -> WriteSet:
        """Buffered writes; ``None`` marks a delete."""
        return dict(self._write_set)

    # ------------------------------------------------------------------
    # Key-value interface
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[bytes]:
        self._ensure_active()
        value, version = self._backend.get_versioned(key)
        self._record_read(key, version)
        return value

    def version(self, key: str) -> Optional[int]:
        self._ensure_active()
        _, version = self._backend.get_versioned(key)
        self._record_read(key, version)
        return version

    def put(self, key: str, value: bytes) -> None:
        self._ensure_active()
        check_key(key)
        self._write_set[key] = check_value(key, value)

    def delete(self, key: str) -> None:
        self._ensure_active()
        check_key(key)
        self._write_set[key] = None

    def scan(self, start_key: str = "", end_key: str = "") -> ScanIterator:
        self._ensure_active()
        return self._backend.open_scan(start_key, end_key, observer=self._record_read)

    def transaction(self) -> "LedgerTransaction":
        raise TransactionStateError("Nested transactions are not supported")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """
        Validate the read set and apply the write set.

        Raises:
            ConflictError: If a key read by this transaction has since changed
            BackendError: If the backend fails to apply the writes
            TransactionStateError: If the transaction already completed
        """
        self._ensure_active()
        self._completed = True
        try:
            with self._backend.lock:
                for key, seen in self._read_set.items():
                    current = self._backend.version(key)
                    if current != seen:
                        logger.warning(
                            f"Rejected ledger transaction: {key!r} moved from version {seen} to {current}"
                        )
                        raise ConflictError(key)
                self._backend.apply(self._write_set)
            logger.debug(
                f"Committed ledger transaction ({len(self._read_set)} read, {len(self._write_set)} written)"
            )
        finally:
            self._clear()

    def rollback(self) -> None:
        """Discard buffered writes. A no-op once the transaction completed."""
        if self._completed:
            return
        self._completed = True
        self._clear()
        logger.debug("Rolled back ledger transaction")

    def __enter__(self) -> "LedgerTransaction":
        if self._in_context:
            raise TransactionStateError("Nested transactions are not supported")
        self._ensure_active()
        self._in_context = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
                logger.warning(f"Rolled back ledger transaction due to exception: {exc_type.__name__}")
        finally:
            self._in_context = False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record_read(self, key: str, version: Optional[int]) -> None:
        if key in self._read_set and self._read_set[key] != version:
            # Same key observed at two versions inside one transaction
            raise ConflictError(key)
        self._read_set[key] = version

    def _ensure_active(self) -> None:
        if self._completed:
            raise TransactionStateError("ledger transaction has already completed")

    def _clear(self) -> None:
        self._read_set.clear()
        self._write_set.clear()
