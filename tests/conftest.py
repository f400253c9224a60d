# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Shared fixtures for the donation ledger tests.

Backend-dependent fixtures are parametrized over every backend so the same
behavior is asserted for the in-memory and the DuckDB world state.
"""

from __future__ import annotations

import pytest

from donation_ledger.backend import DuckDBBackend, LedgerBackend, MemoryBackend
from donation_ledger.contract import DonationContract
from donation_ledger.core import BackendSettings, Donation
from donation_ledger.store import RecordStore


def make_donation(
    id: str = "d1",
    donation_type: str = "money",
    size: int = 0,
    donor: str = "Alice",
    appraised_value: int = 300,
) -> Donation:
    """Create a donation for testing without spelling out every field."""
    return Donation(
        id=id,
        donation_type=donation_type,
        size=size,
        donor=donor,
        appraised_value=appraised_value,
    )


@pytest.fixture(params=["memory", "duckdb"])
def backend(request) -> LedgerBackend:
    """A fresh, empty backend of each kind."""
    if request.param == "duckdb":
        instance = DuckDBBackend(BackendSettings(kind="duckdb", scan_batch_size=2))
    else:
        instance = MemoryBackend()
    yield instance
    instance.close()


@pytest.fixture
def store(backend: LedgerBackend) -> RecordStore:
    return RecordStore(backend)


@pytest.fixture
def contract(backend: LedgerBackend) -> DonationContract:
    return DonationContract(backend)


@pytest.fixture
def sample_donations() -> list[Donation]:
    return [
        make_donation("d1", "money", 0, "Alice", 300),
        make_donation("d2", "ssd", 4, "Bob", 120),
        make_donation("d3", "money", 0, "Carol", 950),
    ]


@pytest.fixture(name="make_donation")
def make_donation_fixture():
    """Factory fixture exposing :func:`make_donation` to test modules."""
    return make_donation
