# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Donation contract: the transaction surface over the record store.

Every call is one ledger transaction. The contract opens a
:class:`~donation_ledger.backend.LedgerTransaction` on its backend, binds a
fresh :class:`~donation_ledger.store.RecordStore` to it, runs the operation
and commits. Failures roll the transaction back, so an operation either
fully succeeds or leaves world state untouched.

Transactions can be called as methods or invoked by name with named
arguments, the way a transaction layer delivers them:

    ```python
    contract = DonationContract(MemoryBackend())
    contract.invoke("Seed")
    contract.invoke("Transfer", id="donation1", new_donor="Bob")
    ```
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .backend import LedgerBackend
from .core.errors import InvalidDonationError, UnknownTransactionError
from .core.records import Donation
from .store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DONATIONS: List[Donation] = [
    Donation(id="donation1", donation_type="money", size=5, donor="Tomoko", appraised_value=300),
    Donation(id="donation2", donation_type="ssd", size=5, donor="Brad", appraised_value=400),
    Donation(id="donation3", donation_type="laptop", size=10, donor="Jin Soo", appraised_value=500),
    Donation(id="donation4", donation_type="money", size=10, donor="Max", appraised_value=600),
    Donation(id="donation5", donation_type="ssd", size=15, donor="Adriana", appraised_value=700),
    Donation(id="donation6", donation_type="books", size=15, donor="Michel", appraised_value=800),
]


class DonationContract:
    """Named, independently committed transactions over donation records."""

    # Transaction name -> method name
    TRANSACTIONS: Dict[str, str] = {
        "Seed": "seed",
        "Create": "create",
        "Read": "read",
        "Update": "update",
        "Delete": "delete",
        "Exists": "exists",
        "Transfer": "transfer",
        "GetAll": "get_all",
    }

    def __init__(self, backend: LedgerBackend) -> None:
        self.backend = backend

    def invoke(self, name: str, **kwargs: Any) -> Any:
        """
        Run the transaction called ``name`` with named arguments.

        Raises:
            UnknownTransactionError: If the contract exposes no such transaction
            InvalidDonationError: If the arguments do not match the transaction
        """
        method_name = self.TRANSACTIONS.get(name)
        if method_name is None:
            raise UnknownTransactionError(name)
        method = getattr(self, method_name)
        try:
            inspect.signature(method).bind(**kwargs)
        except TypeError as e:
            raise InvalidDonationError(f"bad arguments for {name}: {e}") from e
        logger.debug(f"Invoking {name} with {sorted(kwargs)}")
        return method(**kwargs)

    def seed(self, records: Optional[Sequence[Donation]] = None) -> None:
        """Write the initial donations (the built-in set by default)."""
        records = DEFAULT_DONATIONS if records is None else records
        self._run(lambda store: store.seed(records))

    def create(
        self,
        id: str,
        donation_type: str,
        size: int,
        donor: str,
        appraised_value: int,
    ) -> None:
        self._run(lambda store: store.create(id, donation_type, size, donor, appraised_value))

    def read(self, id: str) -> Donation:
        return self._run(lambda store: store.read(id))

    def update(
        self,
        id: str,
        donation_type: str,
        size: int,
        donor: str,
        appraised_value: int,
    ) -> None:
        self._run(lambda store: store.update(id, donation_type, size, donor, appraised_value))

    def delete(self, id: str) -> None:
        self._run(lambda store: store.delete(id))

    def exists(self, id: str) -> bool:
        return self._run(lambda store: store.exists(id))

    def transfer(self, id: str, new_donor: str) -> str:
        """Returns the donor the donation belonged to before the transfer."""
        return self._run(lambda store: store.transfer(id, new_donor))

    def get_all(self) -> List[Donation]:
        return self._run(lambda store: store.get_all())

    def _run(self, operation: Callable[[RecordStore], T]) -> T:
        with self.backend.transaction() as txn:
            return operation(RecordStore(txn))
