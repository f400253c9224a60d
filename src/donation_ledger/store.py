# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Existence-checked CRUD over donation records.

:class:`RecordStore` is a stateless facade: it holds only the backend handle
it was bound to and turns each operation into a short chain of ``get``,
``put``, ``delete`` and ``scan`` calls.

Check-then-act is two separate backend calls. Bound to a plain backend, a
concurrent writer can slip in between them; bound to a
:class:`~donation_ledger.backend.LedgerTransaction`, the commit detects the
interleaving and raises :class:`~donation_ledger.core.ConflictError`.
Conflicts are never retried here.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from .backend import BackendHandle
from .core.errors import (
    AlreadyExists,
    BackendError,
    CodecError,
    ConflictError,
    InvalidDonationError,
    NotFound,
)
from .core.records import (
    Donation,
    decode_donation,
    encode_donation,
    new_donation,
    with_donor,
)

logger = logging.getLogger(__name__)


def _check_id(id: str) -> str:
    if not isinstance(id, str) or not id:
        raise InvalidDonationError(f"invalid donation id {id!r}: ids must be non-empty strings")
    return id


class RecordStore:
    """
    Donation CRUD bound to one backend handle.

    Example:
        ```python
        store = RecordStore(MemoryBackend())
        store.create("d1", "money", 0, "Alice", 300)
        old_donor = store.transfer("d1", "Bob")  # "Alice"
        store.read("d1").donor                   # "Bob"
        ```
    """

    def __init__(self, backend: BackendHandle) -> None:
        self.backend = backend

    def seed(self, records: Iterable[Donation]) -> None:
        """
        Write each record unconditionally, in order.

        Stops at the first failure. Records written before it stay written;
        the raised error carries their count in ``written`` and the
        namespace must be treated as partially seeded.
        """
        written = 0
        for donation in records:
            try:
                self.backend.put(donation.id, encode_donation(donation))
            except (BackendError, ConflictError) as e:
                logger.warning(
                    f"Seeding stopped at {donation.id!r} after {written} record(s); "
                    f"world state is partially seeded"
                )
                e.written = written
                raise
            written += 1
        logger.debug(f"Seeded {written} donation(s)")

    def exists(self, id: str) -> bool:
        """True when a value is stored under ``id``."""
        return self.backend.get(_check_id(id)) is not None

    def create(
        self,
        id: str,
        donation_type: str,
        size: int,
        donor: str,
        appraised_value: int,
    ) -> None:
        """
        Store a new donation.

        Raises:
            AlreadyExists: If ``id`` is already stored
            InvalidDonationError: If any field is invalid
        """
        donation = new_donation(id, donation_type, size, donor, appraised_value)
        if self.exists(id):
            raise AlreadyExists(id)
        self.backend.put(id, encode_donation(donation))
        logger.debug(f"Created donation {id!r}")

    def read(self, id: str) -> Donation:
        """
        Return the donation stored under ``id``.

        Raises:
            NotFound: If ``id`` is not stored
            CodecError: If the stored bytes are not a valid donation
        """
        data = self.backend.get(_check_id(id))
        if data is None:
            raise NotFound(id)
        return decode_donation(data)

    def update(
        self,
        id: str,
        donation_type: str,
        size: int,
        donor: str,
        appraised_value: int,
    ) -> None:
        """
        Replace every field of an existing donation. The id never changes.

        Raises:
            NotFound: If ``id`` is not stored
            InvalidDonationError: If any field is invalid
        """
        donation = new_donation(id, donation_type, size, donor, appraised_value)
        if not self.exists(id):
            raise NotFound(id)
        # overwriting the stored donation, not merging into it
        self.backend.put(id, encode_donation(donation))
        logger.debug(f"Updated donation {id!r}")

    def delete(self, id: str) -> None:
        """
        Remove an existing donation.

        Raises:
            NotFound: If ``id`` is not stored
        """
        if not self.exists(id):
            raise NotFound(id)
        self.backend.delete(id)
        logger.debug(f"Deleted donation {id!r}")

    def transfer(self, id: str, new_donor: str) -> str:
        """
        Hand a donation over to ``new_donor`` and return the previous donor.

        Raises:
            NotFound: If ``id`` is not stored
        """
        donation = self.read(id)
        old_donor = donation.donor
        self.backend.put(id, encode_donation(with_donor(donation, new_donor)))
        logger.debug(f"Transferred donation {id!r} from {old_donor!r} to {new_donor!r}")
        return old_donor

    def get_all(self) -> List[Donation]:
        """Every stored donation, in key order."""
        # empty bounds make an open-ended scan over the whole namespace
        return self.get_range("", "")

    def get_range(self, start_key: str, end_key: str) -> List[Donation]:
        """
        Donations with ids in ``[start_key, end_key)``, in key order.

        The scan handle is released on every exit path. The first value that
        fails to decode aborts the scan.
        """
        donations: List[Donation] = []
        with self.backend.scan(start_key, end_key) as results:
            for key, value in results:
                try:
                    donations.append(decode_donation(value))
                except CodecError as e:
                    raise CodecError(f"donation {key}: {e}") from e
        return donations
