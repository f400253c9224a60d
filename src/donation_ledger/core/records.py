# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Donation record model and its canonical wire encoding.

A donation is stored under its ``id`` as a compact JSON object whose keys
always appear in the same order::

    {"AppraisedValue":300,"DonationType":"money","ID":"d1","Donor":"Alice","Size":0}

Field declaration order on :class:`Donation` *is* the wire order, so
identical logical records encode to identical bytes in every process that
executes the same transaction.
"""

from __future__ import annotations

from pydantic import ConfigDict, Field, ValidationError

from .errors import CodecError, InvalidDonationError
from .model import Model

# Wire names in encoding order
WIRE_FIELDS = ("AppraisedValue", "DonationType", "ID", "Donor", "Size")


class Donation(Model):
    """
    Immutable donation record.

    Attributes:
        appraised_value: Assessed monetary value (>= 0)
        donation_type: Free-form classification, e.g. "money" or "ssd"
        id: Unique key of the record in the ledger namespace
        donor: Name or identifier of the contributor
        size: Quantity or unit count (>= 0)
    """

    model_config = ConfigDict(
        strict=True,  # "5" is not a size and True is not a value
        validate_by_name=True,
        validate_by_alias=True,
    )

    # NOTE: keep declaration order in sync with WIRE_FIELDS
    appraised_value: int = Field(alias="AppraisedValue", ge=0)
    donation_type: str = Field(alias="DonationType")
    id: str = Field(alias="ID", min_length=1)
    donor: str = Field(alias="Donor")
    size: int = Field(alias="Size", ge=0)


def new_donation(
    id: str,
    donation_type: str,
    size: int,
    donor: str,
    appraised_value: int,
) -> Donation:
    """
    Build a donation from caller-supplied fields.

    Raises:
        InvalidDonationError: If any field fails validation
    """
    try:
        return Donation(
            id=id,
            donation_type=donation_type,
            size=size,
            donor=donor,
            appraised_value=appraised_value,
        )
    except ValidationError as e:
        raise InvalidDonationError(f"invalid donation {id!r}: {_summarize(e)}") from e


def with_donor(donation: Donation, donor: str) -> Donation:
    """Return a copy of ``donation`` owned by ``donor``."""
    try:
        return donation.copy(updates={"donor": donor})
    except ValidationError as e:
        raise InvalidDonationError(f"invalid donor for {donation.id!r}: {_summarize(e)}") from e


def encode_donation(donation: Donation) -> bytes:
    """Encode a donation into its canonical UTF-8 JSON bytes."""
    return donation.model_dump_json(by_alias=True).encode("utf-8")


def decode_donation(data: bytes) -> Donation:
    """
    Decode canonical JSON bytes into a donation.

    Only wire names are accepted; Python field names, unknown keys, missing
    keys and mistyped values are all rejected.

    Raises:
        CodecError: If the bytes do not decode to a valid donation
    """
    try:
        return Donation.model_validate_json(data, by_alias=True, by_name=False)
    except ValidationError as e:
        raise CodecError(f"stored bytes are not a valid donation: {_summarize(e)}") from e


def _summarize(error: ValidationError) -> str:
    parts: list[str] = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)

