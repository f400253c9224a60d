# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Donation Ledger - existence-checked CRUD over a versioned key-value world state

Tracks donation records (id, type, size, donor, appraised value) in a
pluggable ledger backend and exposes them as named contract transactions.

Key Entry Points:
- donation_ledger.DonationContract - transaction surface (Seed, Create, ...)
- donation_ledger.RecordStore - CRUD facade bound to a backend handle
- donation_ledger.backend.* - in-memory and DuckDB world state
- donation_ledger.DonationQueries - pandas aggregations

Example Usage:
    ```python
    from donation_ledger import DonationContract
    from donation_ledger.backend import MemoryBackend

    contract = DonationContract(MemoryBackend())
    contract.invoke("Create", id="d1", donation_type="money", size=0,
                    donor="Alice", appraised_value=300)
    contract.invoke("Transfer", id="d1", new_donor="Bob")  # "Alice"
    ```
"""

import logging

# Library logging: applications configure their own handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .backend import (  # noqa: E402
    DuckDBBackend,
    LedgerBackend,
    LedgerTransaction,
    MemoryBackend,
    create_backend,
)
from .contract import DEFAULT_DONATIONS, DonationContract  # noqa: E402
from .core import (  # noqa: E402
    AlreadyExists,
    BackendError,
    BackendSettings,
    CodecError,
    ConflictError,
    Donation,
    DonationLedgerError,
    InvalidDonationError,
    NotFound,
    TransactionStateError,
    UnknownTransactionError,
    decode_donation,
    encode_donation,
)
from .queries import DonationQueries  # noqa: E402
from .store import RecordStore  # noqa: E402

__all__ = [
    "AlreadyExists",
    "BackendError",
    "BackendSettings",
    "CodecError",
    "ConflictError",
    "DEFAULT_DONATIONS",
    "Donation",
    "DonationContract",
    "DonationLedgerError",
    "DonationQueries",
    "DuckDBBackend",
    "InvalidDonationError",
    "LedgerBackend",
    "LedgerTransaction",
    "MemoryBackend",
    "NotFound",
    "RecordStore",
    "TransactionStateError",
    "UnknownTransactionError",
    "create_backend",
    "decode_donation",
    "encode_donation",
]
