# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Donation Ledger Core

Record model, wire codec, error taxonomy and settings shared by the
backends, the record store and the contract.
"""

from .errors import (
    AlreadyExists,
    BackendError,
    CodecError,
    ConflictError,
    DonationLedgerError,
    InvalidDonationError,
    NotFound,
    TransactionStateError,
    UnknownTransactionError,
)
from .model import Model
from .records import (
    WIRE_FIELDS,
    Donation,
    decode_donation,
    encode_donation,
    new_donation,
    with_donor,
)
from .settings import BackendSettings

__all__ = [
    # errors
    "AlreadyExists",
    "BackendError",
    "CodecError",
    "ConflictError",
    "DonationLedgerError",
    "InvalidDonationError",
    "NotFound",
    "TransactionStateError",
    "UnknownTransactionError",
    # records
    "Model",
    "WIRE_FIELDS",
    "Donation",
    "decode_donation",
    "encode_donation",
    "new_donation",
    "with_donor",
    # settings
    "BackendSettings",
]
