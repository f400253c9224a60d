# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
In-process ledger backend.

Keeps the world state in a dict. Every committed write draws a fresh
version from a single counter, so a key that is deleted and re-created
never reuses a version an earlier reader observed.
"""

from __future__ import annotations

import itertools
from typing import Callable, Dict, Iterator, Optional, Tuple

from .base import LedgerBackend, Row, WriteSet


class MemoryBackend(LedgerBackend):
    """
    Dict-backed, versioned world state.

    Range scans iterate over a snapshot of the matching entries taken when
    the scan is opened; later writes do not affect an open scan.
    """

    def __init__(self) -> None:
        super().__init__()
        self._state: Dict[str, Tuple[bytes, int]] = {}
        self._versions = itertools.count(1)

    def __len__(self) -> int:
        with self._lock:
            return len(self._state)

    def _get_entry(self, key: str) -> Optional[Tuple[bytes, int]]:
        with self._lock:
            return self._state.get(key)

    def _scan_rows(
        self, start_key: str, end_key: str
    ) -> Tuple[Iterator[Row], Optional[Callable[[], None]]]:
        with self._lock:
            snapshot = [
                (key, value, version)
                for key, (value, version) in sorted(self._state.items())
                if (not start_key or key >= start_key) and (not end_key or key < end_key)
            ]
        return iter(snapshot), snapshot.clear

    def _apply(self, writes: WriteSet) -> None:
        for key, value in writes.items():
            if value is None:
                self._state.pop(key, None)
            else:
                self._state[key] = (value, next(self._versions))
