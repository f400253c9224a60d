# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Exception hierarchy for the donation ledger.

Every error raised by the store, the backends and the contract derives from
:class:`DonationLedgerError`, so callers can catch the whole family at once
or pick out the specific cause.
"""

from __future__ import annotations

from typing import Optional


class DonationLedgerError(Exception):
    """Base class for all donation ledger errors."""


class NotFound(DonationLedgerError):
    """Raised when reading or mutating a donation id that is not stored."""

    def __init__(self, id: str) -> None:
        self.id = id
        super().__init__(f"the donation {id} does not exist")


class AlreadyExists(DonationLedgerError):
    """Raised when creating a donation whose id is already stored."""

    def __init__(self, id: str) -> None:
        self.id = id
        super().__init__(f"the donation {id} already exists")


class BackendError(DonationLedgerError):
    """
    Raised when the ledger backend fails to read, write or scan.

    Attributes:
        written: For seeding, the number of records persisted before the
            failure. ``None`` for every other operation.
    """

    def __init__(self, message: str, *, written: Optional[int] = None) -> None:
        self.written = written
        super().__init__(message)


class CodecError(DonationLedgerError, ValueError):
    """Raised when stored bytes do not decode to a valid donation."""


class ConflictError(DonationLedgerError):
    """
    Raised when a transaction commit finds that a key it read has changed.

    Conflicts are surfaced, never retried.

    Attributes:
        key: The key whose version changed.
        written: For seeding, the number of records persisted before the
            failure. ``None`` otherwise.
    """

    def __init__(self, key: str, *, written: Optional[int] = None) -> None:
        self.key = key
        self.written = written
        super().__init__(f"the key {key} was modified by a concurrent transaction")


class InvalidDonationError(DonationLedgerError, ValueError):
    """Raised when caller-supplied donation fields are invalid."""


class TransactionStateError(DonationLedgerError):
    """Raised when a ledger transaction is used outside its lifecycle."""


class UnknownTransactionError(DonationLedgerError):
    """Raised when a contract is invoked with a function name it does not expose."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"the contract has no transaction named {name!r}")
