# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ledger backends: the key-value world state records are stored in.
"""

from typing import Union

from .base import LedgerBackend, ScanIterator
from .duckdb_backend import DuckDBBackend
from .factory import create_backend
from .memory import MemoryBackend
from .transaction import LedgerTransaction

# Anything a record store can be bound to
BackendHandle = Union[LedgerBackend, LedgerTransaction]

__all__ = [
    "BackendHandle",
    "DuckDBBackend",
    "LedgerBackend",
    "LedgerTransaction",
    "MemoryBackend",
    "ScanIterator",
    "create_backend",
]
