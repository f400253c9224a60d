# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ledger backend interface.

A backend is the key-value world state a record store reads and writes. It
exposes four primitives (``get``, ``put``, ``delete`` and ``scan``) plus the
per-key versions that optimistic transactions validate against.

Concrete backends implement three hooks:

- ``_get_entry(key)``: committed ``(value, version)`` or ``None``
- ``_scan_rows(start_key, end_key)``: ``(rows, release)`` where rows yields
  ``(key, value, version)`` in key order
- ``_apply(writes)``: atomically apply a write set (``None`` value = delete)
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterator, Optional, Tuple

from ..core.errors import BackendError

logger = logging.getLogger(__name__)

Row = Tuple[str, bytes, int]
WriteSet = Dict[str, Optional[bytes]]


def check_key(key: str) -> str:
    """Reject keys the ledger cannot store."""
    if not isinstance(key, str) or not key:
        raise BackendError(f"invalid key {key!r}: keys must be non-empty strings")
    return key


def check_value(key: str, value: bytes) -> bytes:
    """Reject values that are not byte strings."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise BackendError(
            f"invalid value for key {key!r}: expected bytes, got {type(value).__name__}"
        )
    return bytes(value)


class ScanIterator:
    """
    Iterator over ``(key, value)`` pairs of a range scan.

    Holds a backend cursor until closed. Use it as a context manager so the
    cursor is released on every exit path:

        ```python
        with backend.scan("", "") as results:
            for key, value in results:
                ...
        ```
    """

    def __init__(
        self,
        rows: Iterator[Row],
        release: Optional[Callable[[], None]] = None,
        observer: Optional[Callable[[str, int], None]] = None,
    ) -> None:
        self._rows = rows
        self._release = release
        self._observer = observer
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> "ScanIterator":
        return self

    def __next__(self) -> Tuple[str, bytes]:
        if self._closed:
            raise BackendError("scan iterator is closed")
        key, value, version = next(self._rows)
        if self._observer is not None:
            self._observer(key, version)
        return key, value

    def close(self) -> None:
        """Release the backend cursor. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._release is not None:
            self._release()

    def __enter__(self) -> "ScanIterator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class LedgerBackend(ABC):
    """
    Versioned key-value world state.

    Writes issued directly on a backend commit immediately, one key at a
    time. Use :meth:`transaction` to group reads and writes under optimistic
    conflict detection.
    """

    def __init__(self) -> None:
        # Held while a transaction validates its read set and applies its writes
        self._lock = threading.RLock()
        self._closed = False

    # ------------------------------------------------------------------
    # Public key-value interface
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[bytes]:
        """Return the committed value for ``key``, or ``None`` when absent."""
        value, _ = self.get_versioned(key)
        return value

    def get_versioned(self, key: str) -> Tuple[Optional[bytes], Optional[int]]:
        """Return ``(value, version)`` for ``key``; both ``None`` when absent."""
        check_key(key)
        self._ensure_open()
        entry = self._get_entry(key)
        if entry is None:
            return None, None
        return entry

    def version(self, key: str) -> Optional[int]:
        """Return the committed version of ``key``, or ``None`` when absent."""
        _, version = self.get_versioned(key)
        return version

    def put(self, key: str, value: bytes) -> None:
        """Write ``value`` under ``key``, replacing any previous value."""
        check_key(key)
        self.apply({key: check_value(key, value)})

    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting an absent key is a no-op."""
        check_key(key)
        self.apply({key: None})

    def scan(self, start_key: str = "", end_key: str = "") -> ScanIterator:
        """
        Iterate keys in ``[start_key, end_key)`` in key order.

        Empty bounds are open: ``scan("", "")`` covers the whole namespace.
        """
        return self.open_scan(start_key, end_key)

    def open_scan(
        self,
        start_key: str,
        end_key: str,
        observer: Optional[Callable[[str, int], None]] = None,
    ) -> ScanIterator:
        """Open a range scan, reporting each ``(key, version)`` to ``observer``."""
        if not isinstance(start_key, str) or not isinstance(end_key, str):
            raise BackendError("scan bounds must be strings")
        self._ensure_open()
        rows, release = self._scan_rows(start_key, end_key)
        return ScanIterator(rows, release=release, observer=observer)

    def apply(self, writes: WriteSet) -> None:
        """Atomically apply a write set; ``None`` values delete their key."""
        if not writes:
            return
        self._ensure_open()
        with self._lock:
            self._apply(writes)
        logger.debug(f"Applied {len(writes)} write(s) to {type(self).__name__}")

    def transaction(self) -> "LedgerTransaction":
        """
        Returns an optimistic transaction bound to this backend.

        Example:
            ```python
            with backend.transaction() as txn:
                value = txn.get("donation1")
                txn.put("donation1", new_value)
            # Commits on exit; raises ConflictError if donation1 changed meanwhile
            ```
        """
        from .transaction import LedgerTransaction

        return LedgerTransaction(self)

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release backend resources. Further calls raise BackendError."""
        self._closed = True

    def __enter__(self) -> "LedgerBackend":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise BackendError(f"{type(self).__name__} is closed")

    # ------------------------------------------------------------------
    # Storage hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _get_entry(self, key: str) -> Optional[Tuple[bytes, int]]:
        """Committed ``(value, version)`` for ``key`` or ``None``."""

    @abstractmethod
    def _scan_rows(
        self, start_key: str, end_key: str
    ) -> Tuple[Iterator[Row], Optional[Callable[[], None]]]:
        """Rows in ``[start_key, end_key)`` and a callable releasing the cursor."""

    @abstractmethod
    def _apply(self, writes: WriteSet) -> None:
        """Apply ``writes`` atomically, assigning fresh versions."""
